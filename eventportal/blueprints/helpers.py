"""
Request helpers shared by the blueprints.
"""
from typing import Dict, Any, Iterable

from flask import request

LIST_FIELDS = ('target_roles', 'target_units', 'target_year_levels', 'target_sections')


def request_data(list_fields: Iterable[str] = LIST_FIELDS) -> Dict[str, Any]:
    """
    Read a JSON body or a submitted form into a plain dict.
    Checkbox groups in forms arrive as repeated keys and become lists.
    """
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    data = {}
    for key in request.form:
        if key in list_fields:
            data[key] = request.form.getlist(key)
        else:
            data[key] = request.form.get(key)
    return data

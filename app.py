"""
Event Attendance Portal
Main Flask Application File

Run with ``python app.py`` for the development server with live
countdowns, or point ``flask --app app`` at this module.
"""
import os

from eventportal import create_app
from eventportal.live import socketio

app = create_app()

if __name__ == '__main__':
    host = os.environ.get('EVENTPORTAL_HOST', '127.0.0.1')
    port = int(os.environ.get('EVENTPORTAL_PORT', '5000'))
    app.logger.info("Starting Event Attendance Portal at http://%s:%s", host, port)
    socketio.run(app, debug=os.environ.get('FLASK_DEBUG') == '1', host=host, port=port)

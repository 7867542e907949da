import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///timers.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    PORT = int(os.environ.get('PORT', '8080'))
    # Comma separated list of origins allowed to open a socket
    CORS_ALLOWED_ORIGINS = [
        o.strip() for o in os.environ.get('CORS_ALLOWED_ORIGINS', '*').split(',') if o.strip()
    ]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Send `timer` results to every connected client (True) or only to the requester (False)
    TIMER_BROADCAST = os.environ.get('TIMER_BROADCAST', '1').lower() not in ('0', 'false', 'no')
    # Timer persistence backend: 'sql' or 'memory'
    TIMER_STORE = os.environ.get('TIMER_STORE', 'sql')

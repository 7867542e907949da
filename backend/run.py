from timerbe import create_app, socketio

app = create_app()

if __name__ == '__main__':
    app.logger.info('TimerBE is running...')
    socketio.run(app, host='0.0.0.0', port=app.config['PORT'], debug=True)

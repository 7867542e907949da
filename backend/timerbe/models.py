from timerbe import db


class Timer(db.Model):
    __tablename__ = 'timer'
    id = db.Column(db.Integer, primary_key=True)
    event = db.Column(db.String(255), unique=True, nullable=False, index=True)
    state = db.Column(db.String(16), nullable=False, default='undefined')  # undefined, inactive, active, paused
    # ISO-8601 UTC instants; empty once the timer is stopped
    end_date = db.Column(db.String(32), nullable=False, default='')
    paused_date = db.Column(db.String(32), nullable=False, default='')

    def to_dict(self):
        return {
            'event': self.event,
            'state': self.state,
            'endDate': self.end_date,
            'pausedDate': self.paused_date,
        }

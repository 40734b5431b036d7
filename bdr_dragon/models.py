from . import db
from datetime import datetime
from flask_login import UserMixin

# Roles
ROLE_ADMIN = 'ADMIN'
ROLE_BASIC = 'BASIC'
ROLES = (ROLE_ADMIN, ROLE_BASIC)

# Task list types
LIST_TODAY = 'TODAY'
LIST_THIS_WEEK = 'THIS_WEEK'
LIST_THIS_MONTH = 'THIS_MONTH'
LIST_CUSTOM = 'CUSTOM'

DEFAULT_TASK_LISTS = [
    (LIST_TODAY, "Today's Tasks"),
    (LIST_THIS_WEEK, "This Week's Tasks"),
    (LIST_THIS_MONTH, "This Month's Tasks"),
]

# Task status / recurrence
TASK_OPEN = 'OPEN'
TASK_COMPLETED = 'COMPLETED'
TASK_STATUSES = (TASK_OPEN, TASK_COMPLETED)

RECURRENCE_NONE = 'NONE'
RECURRENCE_DAILY = 'DAILY'
RECURRENCE_WEEKLY = 'WEEKLY'
RECURRENCE_TYPES = (RECURRENCE_NONE, RECURRENCE_DAILY, RECURRENCE_WEEKLY)

QUOTA_FIELDS = {
    'quotaCalls': 'quota_calls',
    'quotaEmails': 'quota_emails',
    'quotaMeetingsBooked': 'quota_meetings_booked',
    'quotaCleanOpportunities': 'quota_clean_opportunities',
}


def _iso(value):
    return value.isoformat() if value is not None else None


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(16), nullable=False, default=ROLE_BASIC)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    first_name = db.Column(db.String(80), nullable=True)
    last_name = db.Column(db.String(80), nullable=True)

    # Monthly quotas
    quota_calls = db.Column(db.Integer, nullable=False, default=0)
    quota_emails = db.Column(db.Integer, nullable=False, default=0)
    quota_meetings_booked = db.Column(db.Integer, nullable=False, default=0)
    quota_clean_opportunities = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user_markets = db.relationship('UserMarket', backref='user', cascade='all, delete-orphan')
    task_lists = db.relationship('TaskList', backref='user', cascade='all, delete-orphan')

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    @property
    def markets(self):
        return [link.market for link in self.user_markets]

    def quota_dict(self):
        return {key: getattr(self, attr) or 0 for key, attr in QUOTA_FIELDS.items()}

    def to_dict(self, include_markets=False):
        data = {
            'id': self.id,
            'email': self.email,
            'role': self.role,
            'isActive': self.is_active,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }
        data.update(self.quota_dict())
        if include_markets:
            data['markets'] = [{'id': m.id, 'name': m.name} for m in self.markets]
        return data

    def __repr__(self):
        return f'<User {self.email}>'

class Market(db.Model):
    __tablename__ = 'markets'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    geographic_description = db.Column(db.Text, nullable=True)
    account_executives = db.Column(db.Text, nullable=True)
    manager_name = db.Column(db.String(128), nullable=True)
    start_date = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'geographicDescription': self.geographic_description,
            'accountExecutives': self.account_executives,
            'managerName': self.manager_name,
            'startDate': _iso(self.start_date),
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }

    def __repr__(self):
        return f'<Market {self.name}>'

class UserMarket(db.Model):
    __tablename__ = 'user_markets'
    __table_args__ = (db.UniqueConstraint('user_id', 'market_id', name='uq_user_market'),)
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    market_id = db.Column(db.Integer, db.ForeignKey('markets.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    market = db.relationship('Market')

class KpiSnapshot(db.Model):
    __tablename__ = 'kpi_snapshots'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    calls = db.Column(db.Integer, nullable=False, default=0)
    emails = db.Column(db.Integer, nullable=False, default=0)
    meetings_booked = db.Column(db.Integer, nullable=False, default=0)
    meetings_held = db.Column(db.Integer, nullable=False, default=0)
    opportunities_created = db.Column(db.Integer, nullable=False, default=0)
    clean_opportunities = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('User', backref='kpi_snapshots')

    def __repr__(self):
        return f'<KpiSnapshot user={self.user_id} date={self.date}>'

class TaskList(db.Model):
    __tablename__ = 'task_lists'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    type = db.Column(db.String(16), nullable=False, default=LIST_CUSTOM)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tasks = db.relationship('Task', backref='task_list', cascade='all, delete-orphan')

    @property
    def is_custom(self):
        return self.type == LIST_CUSTOM

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'type': self.type,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }

class Task(db.Model):
    __tablename__ = 'tasks'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    task_list_id = db.Column(db.Integer, db.ForeignKey('task_lists.id'), nullable=False, index=True)
    title = db.Column(db.String(256), nullable=False)
    description = db.Column(db.Text, nullable=True)
    due_date = db.Column(db.DateTime, nullable=True)
    status = db.Column(db.String(16), nullable=False, default=TASK_OPEN)
    recurrence_type = db.Column(db.String(16), nullable=False, default=RECURRENCE_NONE)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'taskListId': self.task_list_id,
            'title': self.title,
            'description': self.description,
            'dueDate': _iso(self.due_date),
            'status': self.status,
            'recurrenceType': self.recurrence_type,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }

    def __repr__(self):
        return f'<Task {self.id} {self.title!r} {self.status}>'

class IntegrationStatus(db.Model):
    __tablename__ = 'integration_status'
    id = db.Column(db.Integer, primary_key=True)
    scope = db.Column(db.String(32), nullable=False, default='GLOBAL')
    salesforce_status = db.Column(db.String(32), nullable=False, default='NOT_CONFIGURED')
    outreach_status = db.Column(db.String(32), nullable=False, default='STUBBED')
    last_sync_at = db.Column(db.DateTime, nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'scope': self.scope,
            'salesforceStatus': self.salesforce_status,
            'outreachStatus': self.outreach_status,
            'lastSyncAt': _iso(self.last_sync_at),
        }

#!/usr/bin/env python3
"""
Task Manager
Task lists, task CRUD and recurring follow-up creation.
"""

import logging
from collections import namedtuple
from datetime import timedelta
from .models import (db, Task, TaskList, DEFAULT_TASK_LISTS, LIST_CUSTOM, TASK_OPEN,
                     TASK_COMPLETED, TASK_STATUSES, RECURRENCE_NONE, RECURRENCE_DAILY,
                     RECURRENCE_WEEKLY, RECURRENCE_TYPES)
from .errors import BadRequest, NotFound
from .validators import optional_string, parse_datetime

logger = logging.getLogger(__name__)

RECURRENCE_INTERVALS = {
    RECURRENCE_DAILY: timedelta(days=1),
    RECURRENCE_WEEKLY: timedelta(days=7),
}

# Sort order for list types: defaults first, then custom
LIST_TYPE_ORDER = {list_type: index for index, (list_type, _) in enumerate(DEFAULT_TASK_LISTS)}

TaskUpdateResult = namedtuple('TaskUpdateResult', ['task', 'follow_up'])


def next_due_date(previous_due, recurrence_type, now):
    """Midnight of the previous due date (or of now) plus one recurrence interval."""
    base = previous_due or now
    base = base.replace(hour=0, minute=0, second=0, microsecond=0)
    return base + RECURRENCE_INTERVALS[recurrence_type]


class TaskManager:
    """Task list and task operations, always scoped to one owner."""

    @staticmethod
    def create_default_lists(user):
        lists = []
        for list_type, name in DEFAULT_TASK_LISTS:
            task_list = TaskList(user_id=user.id, name=name, type=list_type)
            db.session.add(task_list)
            lists.append(task_list)
        return lists

    @staticmethod
    def get_lists(user_id):
        lists = TaskList.query.filter_by(user_id=user_id).order_by(TaskList.created_at, TaskList.id).all()
        return sorted(lists, key=lambda l: LIST_TYPE_ORDER.get(l.type, len(LIST_TYPE_ORDER)))

    @staticmethod
    def get_list_or_404(user_id, list_id):
        task_list = TaskList.query.filter_by(id=list_id, user_id=user_id).first()
        if not task_list:
            raise NotFound('TaskList not found')
        return task_list

    @staticmethod
    def create_list(user_id, name):
        task_list = TaskList(user_id=user_id, name=name, type=LIST_CUSTOM)
        db.session.add(task_list)
        db.session.commit()
        return task_list

    @staticmethod
    def rename_list(user_id, list_id, name):
        task_list = TaskManager.get_list_or_404(user_id, list_id)
        if not task_list.is_custom:
            raise BadRequest('Default lists cannot be renamed')
        task_list.name = name
        db.session.commit()
        return task_list

    @staticmethod
    def delete_list(user_id, list_id):
        task_list = TaskManager.get_list_or_404(user_id, list_id)
        if not task_list.is_custom:
            raise BadRequest('Default lists cannot be deleted')
        # Tasks go with the list through the relationship cascade
        db.session.delete(task_list)
        db.session.commit()

    @staticmethod
    def get_tasks(user_id, list_id):
        TaskManager.get_list_or_404(user_id, list_id)
        tasks = Task.query.filter_by(user_id=user_id, task_list_id=list_id).order_by(
            Task.created_at.desc(), Task.id.desc()
        ).all()
        # status asc, due date asc (undated last), then newest first (kept from the query order)
        return sorted(tasks, key=lambda t: (t.status, t.due_date is None, t.due_date or 0))

    @staticmethod
    def get_task_or_404(user_id, task_id):
        task = Task.query.filter_by(id=task_id, user_id=user_id).first()
        if not task:
            raise NotFound('Task not found')
        return task

    @staticmethod
    def create_task(user_id, task_list_id, title, description=None, due_date=None,
                    recurrence_type=None, status=TASK_OPEN, commit=True):
        task = Task(
            user_id=user_id,
            task_list_id=task_list_id,
            title=title,
            description=description,
            due_date=due_date,
            status=status,
            recurrence_type=recurrence_type if recurrence_type in (RECURRENCE_DAILY, RECURRENCE_WEEKLY) else RECURRENCE_NONE
        )
        db.session.add(task)
        if commit:
            db.session.commit()
        return task

    @staticmethod
    def update_task(user_id, task_id, data, now):
        """
        Apply a partial update to a task.

        When the update moves the task into COMPLETED and it recurs daily or
        weekly, an OPEN copy due one interval later is created in the same
        list. The result reports that copy as ``follow_up`` (None otherwise).
        """
        task = TaskManager.get_task_or_404(user_id, task_id)
        previous_status = task.status

        if isinstance(data.get('title'), str):
            task.title = data['title']
        if 'description' in data:
            task.description = optional_string(data.get('description'))
        if 'dueDate' in data:
            task.due_date = parse_datetime(data.get('dueDate'), 'dueDate')
        if data.get('status') in TASK_STATUSES:
            task.status = data['status']
        if data.get('recurrenceType') in RECURRENCE_TYPES:
            task.recurrence_type = data['recurrenceType']

        follow_up = None
        completed_now = previous_status != TASK_COMPLETED and task.status == TASK_COMPLETED
        if completed_now and task.recurrence_type in RECURRENCE_INTERVALS:
            follow_up = TaskManager.create_task(
                user_id=task.user_id,
                task_list_id=task.task_list_id,
                title=task.title,
                description=task.description,
                due_date=next_due_date(task.due_date, task.recurrence_type, now),
                recurrence_type=task.recurrence_type,
                commit=False
            )

        db.session.commit()

        if completed_now:
            logger.info(f'Task {task.id} completed by user {user_id}')
        if follow_up is not None:
            logger.info(f'Created {task.recurrence_type} follow-up task {follow_up.id} due {follow_up.due_date:%Y-%m-%d}')

        return TaskUpdateResult(task, follow_up)

    @staticmethod
    def delete_task(user_id, task_id):
        task = TaskManager.get_task_or_404(user_id, task_id)
        db.session.delete(task)
        db.session.commit()

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from .errors import BadRequest
from .task_manager import TaskManager
from .validators import get_json_body, require_string, optional_string, parse_datetime, parse_id
from . import clock

tasks = Blueprint('tasks', __name__)


@tasks.before_request
@login_required
def require_login():
    pass


# Task lists

@tasks.route('/lists', methods=['GET'])
def get_lists():
    return jsonify([task_list.to_dict() for task_list in TaskManager.get_lists(current_user.id)])


@tasks.route('/lists', methods=['POST'])
def create_list():
    """Creates a CUSTOM list."""
    data = get_json_body()
    name = require_string(data, 'name')
    task_list = TaskManager.create_list(current_user.id, name)
    return jsonify(task_list.to_dict()), 201


@tasks.route('/lists/<id:list_id>', methods=['PUT'])
def rename_list(list_id):
    data = get_json_body()
    name = require_string(data, 'name')
    task_list = TaskManager.rename_list(current_user.id, list_id, name)
    return jsonify(task_list.to_dict())


@tasks.route('/lists/<id:list_id>', methods=['DELETE'])
def delete_list(list_id):
    TaskManager.delete_list(current_user.id, list_id)
    return '', 204


# Tasks

@tasks.route('', methods=['GET'])
@tasks.route('/', methods=['GET'])
def get_tasks():
    list_id = request.args.get('listId')
    if not list_id:
        raise BadRequest('listId is required')
    list_id = parse_id(list_id, 'listId')
    return jsonify([task.to_dict() for task in TaskManager.get_tasks(current_user.id, list_id)])


@tasks.route('', methods=['POST'])
@tasks.route('/', methods=['POST'])
def create_task():
    data = get_json_body()
    if data.get('taskListId') in (None, ''):
        raise BadRequest('taskListId required')
    task_list_id = parse_id(data.get('taskListId'), 'taskListId')
    title = require_string(data, 'title', 'title required')

    task_list = TaskManager.get_list_or_404(current_user.id, task_list_id)
    task = TaskManager.create_task(
        user_id=current_user.id,
        task_list_id=task_list.id,
        title=title,
        description=optional_string(data.get('description')),
        due_date=parse_datetime(data.get('dueDate'), 'dueDate'),
        recurrence_type=data.get('recurrenceType')
    )
    return jsonify(task.to_dict()), 201


@tasks.route('/<id:task_id>', methods=['PUT'])
def update_task(task_id):
    """
    Partial update. Completing a DAILY/WEEKLY task creates its next occurrence,
    reported through spawnedFollowUp / followUpTask.
    """
    data = get_json_body()
    result = TaskManager.update_task(current_user.id, task_id, data, clock.now())

    payload = result.task.to_dict()
    payload['spawnedFollowUp'] = result.follow_up is not None
    payload['followUpTask'] = result.follow_up.to_dict() if result.follow_up is not None else None
    return jsonify(payload)


@tasks.route('/<id:task_id>', methods=['DELETE'])
def delete_task(task_id):
    TaskManager.delete_task(current_user.id, task_id)
    return '', 204

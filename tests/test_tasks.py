from datetime import datetime

import pytest

from bdr_dragon import db
from bdr_dragon.errors import BadRequest, NotFound
from bdr_dragon.models import Task, TaskList, LIST_TODAY, LIST_CUSTOM
from bdr_dragon.task_manager import TaskManager, next_due_date


@pytest.fixture
def today_list_id(app, basic_id):
    with app.app_context():
        return TaskList.query.filter_by(user_id=basic_id, type=LIST_TODAY).one().id


class TestNextDueDate:

    def test_daily_from_due_date(self):
        assert next_due_date(datetime(2024, 1, 10, 15, 30), 'DAILY', datetime(2024, 3, 3)) == datetime(2024, 1, 11)

    def test_weekly_from_now_when_undated(self):
        assert next_due_date(None, 'WEEKLY', datetime(2024, 1, 10, 8, 0)) == datetime(2024, 1, 17)


class TestRecurrence:

    def test_completing_daily_task_spawns_next_day(self, app_ctx, basic_id, today_list_id):
        task = TaskManager.create_task(basic_id, today_list_id, 'Call leads',
                                       description='Work the morning list',
                                       due_date=datetime(2024, 1, 10), recurrence_type='DAILY')

        result = TaskManager.update_task(basic_id, task.id, {'status': 'COMPLETED'}, now=datetime(2024, 1, 12, 9))

        assert result.task.status == 'COMPLETED'
        follow_up = result.follow_up
        assert follow_up is not None
        assert follow_up.id != task.id
        assert follow_up.due_date == datetime(2024, 1, 11)
        assert follow_up.status == 'OPEN'
        assert follow_up.recurrence_type == 'DAILY'
        assert follow_up.title == 'Call leads'
        assert follow_up.description == 'Work the morning list'
        assert follow_up.task_list_id == today_list_id

    def test_completing_weekly_task_without_due_date_uses_now(self, app_ctx, basic_id, today_list_id):
        task = TaskManager.create_task(basic_id, today_list_id, 'Pipeline review', recurrence_type='WEEKLY')

        result = TaskManager.update_task(basic_id, task.id, {'status': 'COMPLETED'},
                                         now=datetime(2024, 5, 1, 16, 45))
        assert result.follow_up.due_date == datetime(2024, 5, 8)

    def test_completing_non_recurring_task_spawns_nothing(self, app_ctx, basic_id, today_list_id):
        task = TaskManager.create_task(basic_id, today_list_id, 'One-off', due_date=datetime(2024, 1, 10))

        result = TaskManager.update_task(basic_id, task.id, {'status': 'COMPLETED'}, now=datetime(2024, 1, 10))
        assert result.follow_up is None
        assert Task.query.filter_by(user_id=basic_id).count() == 1

    def test_already_completed_task_spawns_nothing(self, app_ctx, basic_id, today_list_id):
        task = TaskManager.create_task(basic_id, today_list_id, 'Done', recurrence_type='DAILY',
                                       status='COMPLETED')

        result = TaskManager.update_task(basic_id, task.id, {'status': 'COMPLETED'}, now=datetime(2024, 1, 10))
        assert result.follow_up is None

    def test_reopening_spawns_nothing(self, app_ctx, basic_id, today_list_id):
        task = TaskManager.create_task(basic_id, today_list_id, 'Reopen me', recurrence_type='WEEKLY',
                                       status='COMPLETED')

        result = TaskManager.update_task(basic_id, task.id, {'status': 'OPEN'}, now=datetime(2024, 1, 10))
        assert result.task.status == 'OPEN'
        assert result.follow_up is None
        assert Task.query.filter_by(user_id=basic_id).count() == 1

    def test_recurrence_set_in_same_update_applies(self, app_ctx, basic_id, today_list_id):
        task = TaskManager.create_task(basic_id, today_list_id, 'Follow up', due_date=datetime(2024, 1, 10))

        result = TaskManager.update_task(basic_id, task.id,
                                         {'status': 'COMPLETED', 'recurrenceType': 'WEEKLY'},
                                         now=datetime(2024, 1, 10))
        assert result.follow_up.due_date == datetime(2024, 1, 17)

    def test_invalid_enum_values_are_ignored(self, app_ctx, basic_id, today_list_id):
        task = TaskManager.create_task(basic_id, today_list_id, 'Keep me', recurrence_type='MONTHLY')
        assert task.recurrence_type == 'NONE'

        result = TaskManager.update_task(basic_id, task.id, {'status': 'ARCHIVED', 'recurrenceType': 'YEARLY'},
                                         now=datetime(2024, 1, 10))
        assert result.task.status == 'OPEN'
        assert result.task.recurrence_type == 'NONE'

    def test_other_users_task_is_not_found(self, app_ctx, basic_id, today_list_id, make_user):
        task = TaskManager.create_task(basic_id, today_list_id, 'Mine')
        intruder = make_user()
        with pytest.raises(NotFound):
            TaskManager.update_task(intruder, task.id, {'status': 'COMPLETED'}, now=datetime(2024, 1, 10))


class TestTaskLists:

    def test_new_users_get_default_lists(self, app_ctx, basic_id):
        lists = TaskManager.get_lists(basic_id)
        assert [l.type for l in lists] == ['TODAY', 'THIS_WEEK', 'THIS_MONTH']

    def test_default_lists_cannot_be_renamed_or_deleted(self, app_ctx, basic_id, today_list_id):
        with pytest.raises(BadRequest):
            TaskManager.rename_list(basic_id, today_list_id, 'Renamed')
        with pytest.raises(BadRequest):
            TaskManager.delete_list(basic_id, today_list_id)

    def test_deleting_custom_list_removes_its_tasks(self, app_ctx, basic_id):
        custom = TaskManager.create_list(basic_id, 'Prospects')
        TaskManager.create_task(basic_id, custom.id, 'Research ACME')
        custom_id = custom.id

        TaskManager.delete_list(basic_id, custom_id)
        assert db.session.get(TaskList, custom_id) is None
        assert Task.query.filter_by(task_list_id=custom_id).count() == 0


class TestTaskEndpoints:

    def test_requires_login(self, client):
        assert client.get('/tasks/lists').status_code == 401

    def test_list_lifecycle(self, basic_client):
        lists = basic_client.get('/tasks/lists').get_json()
        assert [l['type'] for l in lists] == ['TODAY', 'THIS_WEEK', 'THIS_MONTH']

        created = basic_client.post('/tasks/lists', json={'name': 'Q3 targets'})
        assert created.status_code == 201
        custom = created.get_json()
        assert custom['type'] == LIST_CUSTOM

        lists = basic_client.get('/tasks/lists').get_json()
        assert lists[-1]['id'] == custom['id']

        renamed = basic_client.put(f"/tasks/lists/{custom['id']}", json={'name': 'Q4 targets'})
        assert renamed.get_json()['name'] == 'Q4 targets'

        assert basic_client.delete(f"/tasks/lists/{custom['id']}").status_code == 204
        assert basic_client.delete(f"/tasks/lists/{custom['id']}").status_code == 404

    def test_list_name_required(self, basic_client):
        response = basic_client.post('/tasks/lists', json={})
        assert response.status_code == 400
        assert response.get_json()['message'] == 'name is required'

    def test_renaming_default_list_is_rejected(self, basic_client, today_list_id):
        response = basic_client.put(f'/tasks/lists/{today_list_id}', json={'name': 'Nope'})
        assert response.status_code == 400

    def test_create_and_complete_recurring_task(self, basic_client, today_list_id, monkeypatch):
        monkeypatch.setattr('bdr_dragon.clock.now', lambda: datetime(2024, 1, 10, 18, 0))

        created = basic_client.post('/tasks', json={
            'taskListId': today_list_id,
            'title': 'Daily dials',
            'dueDate': '2024-01-10T00:00:00',
            'recurrenceType': 'DAILY',
        })
        assert created.status_code == 201
        task = created.get_json()
        assert task['status'] == 'OPEN'
        assert task['recurrenceType'] == 'DAILY'

        updated = basic_client.put(f"/tasks/{task['id']}", json={'status': 'COMPLETED'})
        assert updated.status_code == 200
        body = updated.get_json()
        assert body['status'] == 'COMPLETED'
        assert body['spawnedFollowUp'] is True
        assert body['followUpTask']['dueDate'] == '2024-01-11T00:00:00'
        assert body['followUpTask']['status'] == 'OPEN'

        listed = basic_client.get(f'/tasks?listId={today_list_id}').get_json()
        assert [t['status'] for t in listed] == ['COMPLETED', 'OPEN']

    def test_plain_update_reports_no_follow_up(self, basic_client, today_list_id):
        task = basic_client.post('/tasks', json={'taskListId': today_list_id, 'title': 'Email CFO'}).get_json()

        body = basic_client.put(f"/tasks/{task['id']}", json={'title': 'Email the CFO'}).get_json()
        assert body['title'] == 'Email the CFO'
        assert body['spawnedFollowUp'] is False
        assert body['followUpTask'] is None

    def test_tasks_are_ordered_by_status_then_due_date(self, basic_client, today_list_id):
        for title, due in [('later', '2024-03-01'), ('undated', None), ('sooner', '2024-02-01')]:
            basic_client.post('/tasks', json={'taskListId': today_list_id, 'title': title, 'dueDate': due})

        titles = [t['title'] for t in basic_client.get(f'/tasks?listId={today_list_id}').get_json()]
        assert titles == ['sooner', 'later', 'undated']

    def test_task_validation(self, basic_client, today_list_id):
        assert basic_client.get('/tasks').status_code == 400
        assert basic_client.post('/tasks', json={'title': 'No list'}).status_code == 400
        assert basic_client.post('/tasks', json={'taskListId': today_list_id}).status_code == 400
        bad_date = basic_client.post('/tasks', json={'taskListId': today_list_id, 'title': 'x',
                                                     'dueDate': 'not a date'})
        assert bad_date.status_code == 400
        assert 'dueDate' in bad_date.get_json()['message']

    def test_cannot_touch_another_users_list(self, admin_client, today_list_id):
        assert admin_client.get(f'/tasks?listId={today_list_id}').status_code == 404
        response = admin_client.post('/tasks', json={'taskListId': today_list_id, 'title': 'Sneaky'})
        assert response.status_code == 404

    def test_delete_task(self, basic_client, today_list_id):
        task = basic_client.post('/tasks', json={'taskListId': today_list_id, 'title': 'Temp'}).get_json()
        assert basic_client.delete(f"/tasks/{task['id']}").status_code == 204
        assert basic_client.delete(f"/tasks/{task['id']}").status_code == 404

    @pytest.mark.parametrize('task_list_id', [99999999999999999999, '99999999999999999999', 1.9, 0, -1, True])
    def test_task_list_id_must_be_a_valid_id(self, basic_client, task_list_id):
        response = basic_client.post('/tasks', json={'taskListId': task_list_id, 'title': 'x'})
        assert response.status_code == 400
        assert response.get_json() == {'message': 'taskListId must be an integer id'}

    def test_huge_list_id_query_is_rejected(self, basic_client):
        response = basic_client.get('/tasks?listId=99999999999999999999')
        assert response.status_code == 400
        assert 'listId' in response.get_json()['message']

    def test_huge_path_id_is_not_found(self, basic_client):
        assert basic_client.put('/tasks/99999999999999999999', json={'title': 'x'}).status_code == 404
        assert basic_client.delete('/tasks/lists/99999999999999999999').status_code == 404

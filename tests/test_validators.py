import pytest

from bdr_dragon.errors import BadRequest
from bdr_dragon.validators import MAX_ID, parse_id, parse_id_list, parse_quota


class TestParseId:

    @pytest.mark.parametrize('value, expected', [(1, 1), ('42', 42), (' 7 ', 7), (MAX_ID, MAX_ID)])
    def test_valid(self, value, expected):
        assert parse_id(value, 'userId') == expected

    @pytest.mark.parametrize('value', [0, -1, MAX_ID + 1, '99999999999999999999', 1.9, 2.0,
                                       True, None, '', 'abc', '1.5', [1]])
    def test_invalid(self, value):
        with pytest.raises(BadRequest) as excinfo:
            parse_id(value, 'userId')
        assert excinfo.value.message == 'userId must be an integer id'

    def test_id_list_dedupes_and_validates(self):
        assert parse_id_list([3, '3', 5], 'marketIds') == [3, 5]
        with pytest.raises(BadRequest):
            parse_id_list([1, 10 ** 20], 'marketIds')


class TestParseQuota:

    @pytest.mark.parametrize('value, expected', [(None, 0), ('', 0), (0, 0), (12, 12), ('30', 30), (5.0, 5)])
    def test_valid(self, value, expected):
        assert parse_quota(value, 'quotaCalls') == expected

    @pytest.mark.parametrize('value, message', [
        (-1, 'quotaCalls must be zero or greater'),
        (2.5, 'quotaCalls must be a whole number'),
        ('many', 'quotaCalls must be a number'),
        (False, 'quotaCalls must be a number'),
    ])
    def test_invalid(self, value, message):
        with pytest.raises(BadRequest) as excinfo:
            parse_quota(value, 'quotaCalls')
        assert excinfo.value.message == message

import re

import pytest

from errors import BadRequestError
from sql import sql_for_partial_update


def test_partial_update_with_column_aliases():
    result = sql_for_partial_update({"firstName": "Kibo", "age": 14}, {"firstName": "first_name"})
    assert result.set_clause == '"first_name"=$1, "age"=$2'
    assert result.values == ["Kibo", 14]


def test_partial_update_without_aliases_uses_field_names():
    set_clause, values = sql_for_partial_update({"firstName": "Kibo", "age": 14}, {})
    assert set_clause == '"firstName"=$1, "age"=$2'
    assert values == ["Kibo", 14]


def test_partial_update_keeps_null_values():
    result = sql_for_partial_update({"salary": None}, {})
    assert result.set_clause == '"salary"=$1'
    assert result.values == [None]


def test_partial_update_placeholders_follow_insertion_order():
    data = {"equity": "0.5", "title": "t", "salary": 3, "companyHandle": "c1"}
    result = sql_for_partial_update(data, {"companyHandle": "company_handle"})

    placeholders = [int(n) for n in re.findall(r"\$(\d+)", result.set_clause)]
    assert placeholders == list(range(1, len(data) + 1))
    assert len(result.values) == len(placeholders)
    assert result.values == ["0.5", "t", 3, "c1"]
    assert result.set_clause.endswith('"company_handle"=$4')


@pytest.mark.parametrize("js_to_sql", [{}, {"firstName": "first_name"}])
def test_partial_update_with_no_data_is_bad_request(js_to_sql):
    with pytest.raises(BadRequestError) as exc_info:
        sql_for_partial_update({}, js_to_sql)
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "No data"

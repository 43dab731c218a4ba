from typing import Any, Mapping, NamedTuple

from errors import BadRequestError


class UpdateFragment(NamedTuple):
    set_clause: str
    values: list[Any]


def sql_for_partial_update(
    data: Mapping[str, Any], js_to_sql: Mapping[str, str]
) -> UpdateFragment:
    """Build the SET clause of a partial UPDATE.

    ``data`` maps field names to new values; ``None`` sets the column to NULL,
    while a missing key leaves the column untouched. ``js_to_sql`` renames
    fields to columns (``{"companyHandle": "company_handle"}``); unmapped
    fields are used as column names verbatim.

    Placeholders are numbered ``$1..$n`` in the iteration order of ``data``,
    so callers append their own parameters (e.g. the row id) as ``$n+1``.

    Example::

        sql_for_partial_update({"firstName": "Aliya", "age": 32},
                               {"firstName": "first_name"})
        # UpdateFragment(set_clause='"first_name"=$1, "age"=$2',
        #                values=['Aliya', 32])

    Raises BadRequestError if ``data`` is empty.
    """
    keys = list(data)
    if not keys:
        raise BadRequestError("No data")

    cols = [
        f'"{js_to_sql.get(col_name, col_name)}"=${idx}'
        for idx, col_name in enumerate(keys, start=1)
    ]
    return UpdateFragment(set_clause=", ".join(cols), values=[data[k] for k in keys])

"""Optimistic locking against a version the client read earlier."""

from sqlalchemy.orm.attributes import flag_modified, set_committed_value

from inventory_api.db.session import Base


def expect_version(entity: Base, version: int | None, touch: str = "name") -> None:
    """Make the next flush of ``entity`` conditional on ``version``.

    SQLAlchemy puts the committed ``version`` value in the UPDATE's WHERE
    clause, so replacing it with the client's value makes a stale copy fail
    with ``StaleDataError``. ``touch`` is flagged as modified to guarantee an
    UPDATE is emitted even when no other attribute changed.
    """
    if version is None:
        return
    set_committed_value(entity, "version", version)
    flag_modified(entity, touch)

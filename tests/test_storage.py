from __future__ import annotations

import pytest
from kungfu import Ok, Error
from sqlalchemy import create_engine

from storefront import storage as St


@pytest.fixture(params=["memory", "sqlite"])
def backend(request: pytest.FixtureRequest) -> St.Storage:
    if request.param == "memory":
        return St.MemoryStorage()
    return St.SQLAlchemyStorage(create_engine("sqlite:///:memory:"))


def test_get_set_remove(backend: St.Storage) -> None:
    assert backend.get("k") == Ok(None)

    assert backend.set("k", "v1") == Ok(None)
    assert backend.set("k", "v2") == Ok(None)
    assert backend.get("k") == Ok("v2")

    assert backend.remove("k") == Ok(True)
    assert backend.remove("k") == Ok(False)
    assert backend.get("k") == Ok(None)


def test_sqlalchemy_errors_become_storage_errors() -> None:
    storage = St.SQLAlchemyStorage(create_engine("sqlite:///:memory:"), create_tables=False)

    match storage.get("k"):
        case Error(e):
            assert isinstance(e, St.StorageError)
            assert e.cause is not None
        case Ok(value):
            pytest.fail(f"expected error, got {value!r}")


def test_open_storage_picks_backend() -> None:
    assert isinstance(St.open_storage(""), St.MemoryStorage)
    assert isinstance(St.open_storage("sqlite:///:memory:"), St.SQLAlchemyStorage)


def test_storage_from_functions() -> None:
    values: dict[str, str] = {}

    storage = St.storage_from(
        get=lambda k: Ok(values.get(k)),
        set=lambda k, v: Ok(values.__setitem__(k, v)),
        remove=lambda k: Ok(values.pop(k, None) is not None),
    )

    storage.set("a", "1")
    assert storage.get("a") == Ok("1")
    assert storage.remove("a") == Ok(True)

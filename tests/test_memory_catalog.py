from __future__ import annotations

import json
from pathlib import Path

import pytest

from pyfitment.catalog.memory import InMemoryCatalog
from pyfitment.config import NavigatorConfig
from pyfitment.models.catalog import CatalogSnapshot
from tests.conftest import CATALOG


@pytest.mark.asyncio
async def test_makes_and_models_follow_year_index(snapshot: CatalogSnapshot) -> None:
    catalog = InMemoryCatalog(snapshot)

    assert [make.name for make in await catalog.get_makes(2009)] == ["Honda", "Ford"]
    assert [model.name for model in await catalog.get_models(5, 2009)] == ["Civic"]
    assert [model.name for model in await catalog.get_models(5, 2010)] == ["Civic", "Accord"]


@pytest.mark.asyncio
async def test_unindexed_year_falls_back_to_everything(snapshot: CatalogSnapshot) -> None:
    catalog = InMemoryCatalog(snapshot)

    assert len(await catalog.get_makes(1999)) == 3
    assert [model.name for model in await catalog.get_models(5, 1999)] == ["Civic", "Accord"]


@pytest.mark.asyncio
async def test_responses_are_fresh_lists(snapshot: CatalogSnapshot) -> None:
    catalog = InMemoryCatalog(snapshot)
    years = await catalog.get_years()
    years.append(1900)

    assert await catalog.get_years() == [2009, 2010]


@pytest.mark.asyncio
async def test_parts_filtered_by_category_and_engine(snapshot: CatalogSnapshot) -> None:
    catalog = InMemoryCatalog(snapshot)

    assert [part.id for part in await catalog.get_parts(2)] == [1000, 1001, 1003]
    assert [part.id for part in await catalog.get_parts(2, 900)] == [1003]
    assert await catalog.get_parts(6) == []


@pytest.mark.asyncio
async def test_search_uses_configured_limit(snapshot: CatalogSnapshot) -> None:
    catalog = InMemoryCatalog(snapshot, result_limit=2)
    assert len(await catalog.search("2010")) == 2


def test_from_config_loads_catalog_file(tmp_path: Path) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    catalog = InMemoryCatalog.from_config(NavigatorConfig(catalog_path=str(path), mock_latency=0.01))

    assert catalog.snapshot.years == [2009, 2010]


def test_from_config_without_catalog_is_empty() -> None:
    assert InMemoryCatalog.from_config(NavigatorConfig()).snapshot.makes == []


@pytest.mark.asyncio
async def test_empty_year_index_means_no_makes() -> None:
    data = {**CATALOG, "yearMakeIds": {"2009": [5, 9], "2010": []}}
    catalog = InMemoryCatalog(CatalogSnapshot.model_validate(data))

    assert await catalog.get_makes(2010) == []
    assert len(await catalog.get_makes(2011)) == 3

# tests/test_bundles_api.py
import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rental_quotes.models import EquipmentBundleItem
from tests.conftest import API, create_category, create_equipment


@pytest.fixture
def catalog(client, user_headers):
    category = create_category(client, user_headers, "Audio")
    speaker = create_equipment(client, user_headers, category["id"], "Speaker", price="50.00")
    mixer = create_equipment(client, user_headers, category["id"], "Mixer", price="120.00")
    return {"speaker": speaker, "mixer": mixer}


def create_bundle(client, headers, items, **extra):
    payload = {"name": "PA Package", "daily_rental_price": "200.00", "bundle_items": items, **extra}
    return client.post(f"{API}/bundles/", json=payload, headers=headers)


def bundle_item_count(sync_engine):
    with Session(sync_engine) as session:
        return session.execute(select(func.count(EquipmentBundleItem.id))).scalar()


def test_create_bundle_with_items(client, user_headers, catalog):
    response = create_bundle(
        client,
        user_headers,
        [
            {"equipment_id": catalog["speaker"]["id"], "quantity": 4},
            {"equipment_id": catalog["mixer"]["id"]},
        ],
        discount="12.5",
    )

    assert response.status_code == 201
    bundle = response.json()["data"]
    assert bundle["daily_rental_price"] == "200.00"
    assert bundle["discount"] == "12.50"
    assert [(i["equipment"]["name"], i["quantity"]) for i in bundle["bundle_items"]] == [
        ("Speaker", 4),
        ("Mixer", 1),
    ]


def test_bundle_price_is_not_derived_from_items(client, user_headers, catalog):
    response = create_bundle(client, user_headers, [{"equipment_id": catalog["mixer"]["id"], "quantity": 10}])

    assert response.json()["data"]["daily_rental_price"] == "200.00"


def test_bundle_with_unknown_equipment_is_rejected(client, user_headers, catalog, sync_engine):
    response = create_bundle(client, user_headers, [{"equipment_id": 999}])

    assert response.status_code == 404
    assert bundle_item_count(sync_engine) == 0


def test_bundle_discount_must_be_a_percentage(client, user_headers, catalog):
    response = create_bundle(client, user_headers, [], discount="150")
    assert response.status_code == 400


def test_bundle_item_quantity_must_be_positive(client, user_headers, catalog):
    response = create_bundle(client, user_headers, [{"equipment_id": catalog["mixer"]["id"], "quantity": 0}])
    assert response.status_code == 400


def test_update_replaces_bundle_items(client, user_headers, catalog, sync_engine):
    bundle = create_bundle(
        client,
        user_headers,
        [
            {"equipment_id": catalog["speaker"]["id"], "quantity": 2},
            {"equipment_id": catalog["mixer"]["id"], "quantity": 1},
        ],
    ).json()["data"]

    response = client.put(
        f"{API}/bundles/{bundle['id']}",
        json={"name": "Small PA", "bundle_items": [{"equipment_id": catalog["speaker"]["id"], "quantity": 6}]},
        headers=user_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Small PA"
    assert [(i["equipment_id"], i["quantity"]) for i in data["bundle_items"]] == [(catalog["speaker"]["id"], 6)]
    assert bundle_item_count(sync_engine) == 1


def test_update_without_items_keeps_them(client, user_headers, catalog):
    bundle = create_bundle(client, user_headers, [{"equipment_id": catalog["mixer"]["id"]}]).json()["data"]

    response = client.put(f"{API}/bundles/{bundle['id']}", json={"discount": "5"}, headers=user_headers)

    data = response.json()["data"]
    assert data["discount"] == "5.00"
    assert len(data["bundle_items"]) == 1


def test_delete_bundle_removes_its_items(client, user_headers, admin_headers, catalog, sync_engine):
    bundle = create_bundle(
        client,
        user_headers,
        [{"equipment_id": catalog["speaker"]["id"]}, {"equipment_id": catalog["mixer"]["id"]}],
    ).json()["data"]
    assert bundle_item_count(sync_engine) == 2

    response = client.delete(f"{API}/bundles/{bundle['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert bundle_item_count(sync_engine) == 0
    assert client.get(f"{API}/bundles/{bundle['id']}", headers=user_headers).status_code == 404


def test_equipment_in_a_bundle_cannot_be_deleted(client, user_headers, admin_headers, catalog):
    bundle = create_bundle(client, user_headers, [{"equipment_id": catalog["speaker"]["id"]}]).json()["data"]
    speaker_id = catalog["speaker"]["id"]

    response = client.delete(f"{API}/equipment/{speaker_id}", headers=admin_headers)
    assert response.status_code == 400
    assert client.get(f"{API}/equipment/{speaker_id}", headers=user_headers).status_code == 200

    client.delete(f"{API}/bundles/{bundle['id']}", headers=admin_headers)
    assert client.delete(f"{API}/equipment/{speaker_id}", headers=admin_headers).status_code == 200


def test_list_bundles_filters(client, user_headers, catalog):
    create_bundle(client, user_headers, [], name="Budget", daily_rental_price="90.00")
    create_bundle(client, user_headers, [], name="Premium", daily_rental_price="900.00")
    create_bundle(client, user_headers, [], name="Retired", daily_rental_price="50.00", is_active=False)

    def names(**params):
        response = client.get(f"{API}/bundles/", params=params, headers=user_headers)
        return [b["name"] for b in response.json()["data"]]

    assert names() == ["Budget", "Premium", "Retired"]
    assert names(min_price="100") == ["Premium"]
    assert names(max_price="100", is_active="true") == ["Budget"]
    assert names(search="prem") == ["Premium"]

"""
Tests for catalog ingestion and battery score maintenance.
"""
import pytest

from src.data_pipeline.catalog_ingestion import (
    CatalogIngestor,
    DEFAULT_IMAGE_URL,
    recalculate_battery_scores,
    transform_record,
    read_csv,
)
from tests.conftest import FakePhoneClient, make_phone


APPLE_ROW = {
    'brand': 'Apple',
    'model': 'iPhone X',
    'price': '₹70,000',
    'memory_and_storage': '8 GB RAM | 256 GB ROM',
    'display': '6.1 inch Super Retina XDR',
    'camera': '48MP + 12MP',
    'processor': 'A17 Pro',
    'battery': '4500mAh',
    'image': '',
    'url': '',
}


class FailingClient(FakePhoneClient):
    """Rejects upserts for one model."""

    def __init__(self, failing_model):
        super().__init__()
        self.failing_model = failing_model

    def upsert_phone(self, phone):
        if phone.model == self.failing_model:
            raise RuntimeError("connection reset")
        return super().upsert_phone(phone)


def test_transform_record_defaults_and_memory_split():
    phone = transform_record(APPLE_ROW)
    assert phone.price == 70000
    assert phone.ram == '8GB'
    assert phone.storage == '256GB'
    assert phone.image_url == DEFAULT_IMAGE_URL
    assert phone.product_url == '#'
    assert phone.camera_score is None


def test_ingest_scores_and_stores(fake_client):
    stats = CatalogIngestor(fake_client, verbose=False).ingest([APPLE_ROW])

    assert (stats.total, stats.imported, stats.skipped, stats.failed) == (1, 1, 0, 0)
    stored = fake_client.phones[('Apple', 'iPhone X')]
    assert stored.feature_score('camera') == 82
    assert stored.feature_score('battery') == 78
    assert stored.feature_score('performance') == 98
    assert stored.feature_score('privacy') == 95
    assert stored.feature_score('design') == 90


def test_ingest_twice_keeps_one_row(fake_client):
    ingestor = CatalogIngestor(fake_client, verbose=False)
    ingestor.ingest([APPLE_ROW])
    updated = dict(APPLE_ROW, price='72000')
    ingestor.ingest([updated])

    assert fake_client.get_phone_count() == 1
    assert fake_client.phones[('Apple', 'iPhone X')].price == 72000


@pytest.mark.parametrize("override", [
    {'brand': ''},
    {'model': '   '},
    {'price': 'N/A'},
    {'price': '0'},
])
def test_invalid_rows_are_skipped(fake_client, override):
    stats = CatalogIngestor(fake_client, verbose=False).ingest([dict(APPLE_ROW, **override)])
    assert stats.skipped == 1
    assert stats.imported == 0
    assert fake_client.get_phone_count() == 0


def test_failed_upsert_does_not_stop_batch():
    client = FailingClient('Broken')
    rows = [
        dict(APPLE_ROW, model='Broken'),
        dict(APPLE_ROW, model='iPhone Y'),
    ]
    stats = CatalogIngestor(client, verbose=False).ingest(rows)

    assert stats.failed == 1
    assert stats.imported == 1
    assert list(client.phones) == [('Apple', 'iPhone Y')]


def test_ingest_csv(tmp_path, fake_client):
    path = tmp_path / 'phones.csv'
    path.write_text(
        "brand,model,price,memory_and_storage,display,camera,processor,battery,image,url\n"
        "Samsung,Galaxy S24,\"₹64,999\",8 GB RAM | 128 GB ROM,6.2 inch,50MP + 12MP,"
        "Snapdragon 8 Gen 3,4000 mAh,https://img/s24.jpg,https://shop/s24\n"
        ",Nameless,1000,,,,,,,\n",
        encoding='utf-8'
    )

    assert len(read_csv(path)) == 2
    stats = CatalogIngestor(fake_client, verbose=False).ingest_csv(path)

    assert (stats.total, stats.imported, stats.skipped) == (2, 1, 1)
    phone = fake_client.phones[('Samsung', 'Galaxy S24')]
    assert phone.price == 64999
    assert phone.image_url == 'https://img/s24.jpg'
    assert phone.feature_score('performance') == 95


def test_recalculate_battery_scores_uses_unclamped_buckets():
    client = FakePhoneClient([
        make_phone(brand='Tecno', model='Pova', battery='7000 mAh'),
        make_phone(brand='Apple', model='Mini', battery='3200 mAh'),
        make_phone(brand='Nokia', model='Classic', battery='Li-Ion'),
    ])

    updated = recalculate_battery_scores(client, verbose=False)

    assert updated == 2
    scores = {client.get_phone(pid).model: score for pid, score in client.battery_updates}
    assert scores == {'Pova': 98, 'Mini': 70}
    assert client.phones[('Nokia', 'Classic')].battery_score == 80

"""
Catalog Ingestion - Load phone records, score them, and upsert the catalog.

CSV format (header row required):
    brand, model, price, memory_and_storage, display, camera, processor,
    battery, image, url
Optional columns: ram, storage, front_camera
"""
import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from src.recommend.feature_scorer import FeatureScorer, battery_score_from_text
from src.recommend.models import Phone
from src.recommend.spec_normalizer import (
    extract_battery_capacity,
    extract_ram,
    extract_storage,
    parse_price,
)

DEFAULT_IMAGE_URL = 'https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?w=400'


@dataclass
class IngestionStats:
    total: int = 0
    skipped: int = 0
    imported: int = 0
    failed: int = 0


def _field(row: Dict, *names: str) -> str:
    for name in names:
        value = row.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ''


def transform_record(row: Dict) -> Phone:
    """Turn one raw record into an unscored Phone."""
    memory_and_storage = _field(row, 'memory_and_storage')
    return Phone(
        brand=_field(row, 'brand'),
        model=_field(row, 'model'),
        price=parse_price(row.get('price')) or 0,
        memory_and_storage=memory_and_storage,
        display=_field(row, 'display', 'display_info'),
        processor=_field(row, 'processor'),
        ram=_field(row, 'ram') or extract_ram(memory_and_storage) or '',
        storage=_field(row, 'storage') or extract_storage(memory_and_storage) or '',
        battery=_field(row, 'battery'),
        camera=_field(row, 'camera'),
        front_camera=_field(row, 'front_camera'),
        image_url=_field(row, 'image', 'image_url') or DEFAULT_IMAGE_URL,
        product_url=_field(row, 'url', 'product_url') or '#'
    )


def is_valid(phone: Phone) -> bool:
    return bool(phone.brand) and bool(phone.model) and phone.price > 0


def read_csv(path: Path) -> List[Dict]:
    with open(path, newline='', encoding='utf-8-sig') as f:
        return list(csv.DictReader(f))


class CatalogIngestor:
    """
    Score and upsert phone records.

    Invalid rows (no brand, no model, or non-positive price) are skipped;
    a failed upsert is counted and the batch continues.
    """

    def __init__(self, phone_client, scorer: Optional[FeatureScorer] = None, verbose: bool = True):
        self.phone_client = phone_client
        self.scorer = scorer or FeatureScorer()
        self.verbose = verbose

    def prepare(self, row: Dict) -> Optional[Phone]:
        """Transform and score a record; None if it is invalid."""
        phone = transform_record(row)
        if not is_valid(phone):
            return None
        phone.apply_scores(self.scorer.score(phone))
        return phone

    def ingest(self, rows: Iterable[Dict]) -> IngestionStats:
        stats = IngestionStats()

        for row in rows:
            stats.total += 1
            phone = self.prepare(row)
            if phone is None:
                stats.skipped += 1
                if self.verbose:
                    print(f"  [!] Skipping invalid phone: {row.get('brand') or 'N/A'} {row.get('model') or 'N/A'}")
                continue

            try:
                self.phone_client.upsert_phone(phone)
                stats.imported += 1
                if self.verbose and stats.imported % 10 == 0:
                    print(f"  [*] Processed {stats.imported} phones...")
            except Exception as e:
                stats.failed += 1
                if self.verbose:
                    print(f"  [-] Error upserting {phone.name}: {e}")

        return stats

    def ingest_csv(self, path: Path) -> IngestionStats:
        rows = read_csv(path)
        if self.verbose:
            print(f"[+] Found {len(rows)} phones in {path}")
        return self.ingest(rows)


def recalculate_battery_scores(phone_client, verbose: bool = True) -> int:
    """
    Re-derive battery scores for every stored phone from its battery text.

    Phones whose battery text has no capacity are left untouched.

    Returns:
        Number of phones updated
    """
    phones = phone_client.list_phones()
    if verbose:
        print(f"[*] Found {len(phones)} phones to update")

    updated = 0
    for phone in phones:
        if extract_battery_capacity(phone.battery) is None:
            continue
        try:
            phone_client.update_battery_score(phone.id, battery_score_from_text(phone.battery))
            updated += 1
        except Exception as e:
            if verbose:
                print(f"  [-] Error updating {phone.name}: {e}")
            continue

        if verbose and updated % 50 == 0:
            print(f"  [+] Updated {updated}/{len(phones)} phones...")

    return updated

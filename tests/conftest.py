"""Shared test fixtures: reference records, resolver, submissions and fake collaborators."""

from collections.abc import Callable
from typing import Any

import pytest

from pledge_form.core.config import Settings
from pledge_form.lib.collaborators.base import PersistenceResult
from pledge_form.lib.locations.index import LocationIndex
from pledge_form.lib.locations.resolver import LocationResolver
from pledge_form.lib.locations.types import LocationRecord
from pledge_form.schemas.submission import PartialSubmission


class FakeHandle:
    """Cancel handle recorded by ``FakeScheduler``."""

    def __init__(self, fn: Callable[[], None], delay: float) -> None:
        self.fn = fn
        self.delay = delay
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Scheduler that only runs deferred calls when the test says so."""

    def __init__(self) -> None:
        self.handles: list[FakeHandle] = []

    def schedule(self, fn: Callable[[], None], delay: float) -> FakeHandle:
        handle = FakeHandle(fn, delay)
        self.handles.append(handle)
        return handle

    @property
    def live(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def flush(self) -> int:
        """Run every live deferred call once; return how many ran."""
        ran = 0
        for handle in self.live:
            handle.cancelled = True
            handle.fn()
            ran += 1
        return ran


class FakePhoneChecker:
    """In-memory ``PhoneChecker``."""

    def __init__(self, registered: set[str] | None = None) -> None:
        self.registered = registered or set()
        self.calls: list[tuple[str, int | None]] = []

    async def exists(self, phone: str, exclude_id: int | None = None) -> bool:
        self.calls.append((phone, exclude_id))
        return phone in self.registered


class FakeStore:
    """In-memory ``RegistrationStore`` returning a configurable result."""

    def __init__(self, result: PersistenceResult | None = None) -> None:
        self.result = result or PersistenceResult(success=True, data={"id": 101})
        self.created: list[PartialSubmission] = []
        self.updated: list[tuple[int, PartialSubmission]] = []

    async def create(self, submission: PartialSubmission) -> PersistenceResult:
        self.created.append(submission)
        return self.result

    async def update(self, registration_id: int, submission: PartialSubmission) -> PersistenceResult:
        self.updated.append((registration_id, submission))
        return self.result

    @property
    def calls(self) -> int:
        return len(self.created) + len(self.updated)


def _record(district: str, amphoe: str, province: str, zipcode: int, region: str = "ภาคกลาง") -> LocationRecord:
    return LocationRecord(district=district, amphoe=amphoe, province=province, zipcode=zipcode, region_type=region)


@pytest.fixture
def sample_records() -> list[LocationRecord]:
    """A small reference table: Bang Rak and Khlong Toei (Bangkok) plus Chiang Mai."""
    return [
        _record("มหาพฤฒาราม", "บางรัก", "กรุงเทพมหานคร", 10500),
        _record("สีลม", "บางรัก", "กรุงเทพมหานคร", 10500),
        _record("สุริยวงศ์", "บางรัก", "กรุงเทพมหานคร", 10500),
        _record("บางรัก", "บางรัก", "กรุงเทพมหานคร", 10500),
        _record("สี่พระยา", "บางรัก", "กรุงเทพมหานคร", 10500),
        _record("คลองเตย", "คลองเตย", "กรุงเทพมหานคร", 10110),
        _record("คลองตัน", "คลองเตย", "กรุงเทพมหานคร", 10110),
        _record("พระโขนง", "คลองเตย", "กรุงเทพมหานคร", 10110),
        _record("ศรีภูมิ", "เมืองเชียงใหม่", "เชียงใหม่", 50200, "ภาคเหนือ"),
        _record("หายยา", "เมืองเชียงใหม่", "เชียงใหม่", 50100, "ภาคเหนือ"),
    ]


@pytest.fixture
def location_index(sample_records: list[LocationRecord]) -> LocationIndex:
    """A freshly built index per test."""
    return LocationIndex(sample_records)


@pytest.fixture
def resolver(location_index: LocationIndex) -> LocationResolver:
    return LocationResolver(location_index)


@pytest.fixture
def silom(sample_records: list[LocationRecord]) -> LocationRecord:
    return sample_records[1]


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def phone_checker() -> FakePhoneChecker:
    return FakePhoneChecker(registered={"0899999999"})


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def settings() -> Settings:
    """Test settings with no env file."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def complete_values() -> dict[str, Any]:
    """Field values that pass every step of the create form."""
    return {
        "first_name": "สมชาย",
        "last_name": "ใจดี",
        "organization_choice": "เกษตรกร",
        "address_line1": "99/1 ถนนสีลม",
        "district": "สีลม",
        "amphoe": "บางรัก",
        "province": "กรุงเทพมหานคร",
        "zipcode": "10500",
        "region_type": "ภาคกลาง",
        "phone_number": "0812345678",
        "number_of_signers": 25,
        "image1": "front.jpg",
        "image2": "back.png",
    }


@pytest.fixture
def complete_submission(complete_values: dict[str, Any]) -> PartialSubmission:
    """A create-flow submission that passes every step."""
    return PartialSubmission(**complete_values)

"""Unit tests for the hero formatter and request schemas."""

from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from conftest import make_hero, make_hero_create
from hero_api.hero.formatter import to_hero_create, to_hero_response
from hero_api.hero.schema import HeroCreate, HeroListResponse, HeroUpdate

pytestmark = pytest.mark.unit


class TestToHeroResponse:
    """Tests for to_hero_response()."""

    def test_maps_fields_to_wire_shape(self):
        created = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)
        hero = make_hero(created_at=created, updated_at=created)

        response = to_hero_response(hero)

        assert response.model_dump() == {
            "id": str(hero.id),
            "name": "Barry Allen",
            "nickname": "the-flash",
            "date_of_birth": "1990-03-29",
            "universe": "DC",
            "main_power": "Speed Force",
            "avatar_url": "http://example.com/flash.jpg",
            "is_active": True,
            "created_at": "2024-05-01T12:30:00+00:00",
            "updated_at": "2024-05-01T12:30:00+00:00",
        }

    def test_naive_timestamps_are_treated_as_utc(self):
        naive = datetime(2024, 5, 1, 12, 30)
        hero = make_hero(created_at=naive, updated_at=naive)

        response = to_hero_response(hero)

        assert response.created_at == "2024-05-01T12:30:00+00:00"

    def test_round_trip_recovers_input_fields(self):
        original = make_hero_create(avatar_url="")

        restored = to_hero_create(to_hero_response(make_hero(**original.model_dump())))

        assert restored == original


class TestHeroCreateSchema:
    """Validation rules of HeroCreate."""

    def test_accepts_camel_case_payload(self):
        hero = HeroCreate.model_validate(
            {
                "name": "Clark Kent",
                "nickname": "Superman",
                "dateOfBirth": "1938-04-18",
                "universe": "DC",
                "mainPower": "Flight",
                "avatarUrl": "",
            }
        )

        assert hero.date_of_birth == date(1938, 4, 18)
        assert hero.main_power == "Flight"
        assert hero.avatar_url == ""

    def test_accepts_iso_datetime_at_midnight(self):
        hero = make_hero_create(date_of_birth="1995-05-15T00:00:00Z")

        assert hero.date_of_birth == date(1995, 5, 15)

    @pytest.mark.parametrize(
        "value",
        ["1938-04-18T10:30:00.000Z", "1938-04-18T23:59:59", "1938-04-18T08:00:00+09:00"],
    )
    def test_truncates_iso_datetime_to_its_date(self, value: str):
        hero = make_hero_create(date_of_birth=value)

        assert hero.date_of_birth == date(1938, 4, 18)

    def test_invalid_datetime_string_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            HeroUpdate.model_validate({"dateOfBirth": "1938-04-18Tnoon"})

        assert exc_info.value.errors()[0]["loc"] == ("dateOfBirth",)

    def test_keeps_avatar_url_verbatim(self):
        hero = make_hero_create(avatar_url="https://example.com")

        assert hero.avatar_url == "https://example.com"

    def test_reports_every_violation(self):
        with pytest.raises(ValidationError) as exc_info:
            HeroCreate.model_validate(
                {
                    "name": "Al",
                    "nickname": "X",
                    "dateOfBirth": "not-a-date",
                    "universe": "",
                    "mainPower": "",
                    "avatarUrl": "not a url",
                }
            )

        locations = {error["loc"][0] for error in exc_info.value.errors()}
        assert locations == {
            "name",
            "nickname",
            "dateOfBirth",
            "universe",
            "mainPower",
            "avatarUrl",
        }

    def test_missing_fields_are_required(self):
        with pytest.raises(ValidationError) as exc_info:
            HeroCreate.model_validate({})

        assert len(exc_info.value.errors()) == 6


class TestHeroUpdateSchema:
    """Validation rules of HeroUpdate."""

    def test_changes_contain_only_supplied_fields(self):
        update = HeroUpdate.model_validate({"mainPower": "Time travel", "name": None})

        assert update.changes() == {"main_power": "Time travel"}

    def test_empty_body_has_no_changes(self):
        assert HeroUpdate().changes() == {}

    def test_supplied_fields_keep_create_rules(self):
        with pytest.raises(ValidationError):
            HeroUpdate.model_validate({"nickname": "ab"})


class TestHeroListResponse:
    def test_serializes_total_pages_in_camel_case(self):
        page = HeroListResponse(heroes=[], total=0, page=1, limit=10, total_pages=0)

        assert page.model_dump(by_alias=True)["totalPages"] == 0

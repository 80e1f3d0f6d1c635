from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from zone_mapper.config import Settings
from zone_mapper.errors import ConfigurationError
from zone_mapper.mapper import build_mapper
from zone_mapper.models.data import AppointmentDto, PersonDto
from zone_mapper.models.domain import Appointment, Person
from zone_mapper.services import FullNameFormatter, StaticZoneLabels
from zone_mapper.testing import assert_equivalent_excluding_converted_dates

UTC = timezone.utc


def test_configuration_is_valid(mapper):
    assert mapper.validated
    assert len(mapper) == 4


# -- Person: data (Central) -> domain (UTC) ----------------------------------


def test_person_dto_to_person_converts_date_of_birth(mapper, central):
    local = datetime(2024, 1, 15, 10, 0)
    person = mapper.map(PersonDto(date_of_birth=local), Person)
    assert person.date_of_birth == central.to_utc(local)
    assert person.date_of_birth == (local + timedelta(hours=6)).replace(tzinfo=UTC)


def test_person_dto_to_person_converts_created_date(mapper):
    person = mapper.map(PersonDto(created_date=datetime(2024, 3, 15, 14, 30)), Person)
    assert person.created_date == datetime(2024, 3, 15, 19, 30, tzinfo=UTC)


def test_person_dto_to_person_converts_last_modified_date(mapper):
    local = datetime(2024, 7, 4, 12, 0)
    person = mapper.map(PersonDto(last_modified_date=local), Person)
    assert person.last_modified_date == (local + timedelta(hours=5)).replace(tzinfo=UTC)


# -- Person: domain (UTC) -> data (Central) ----------------------------------


def test_person_to_person_dto_converts_date_of_birth(mapper):
    instant = datetime(2024, 1, 15, 16, 0, tzinfo=UTC)
    dto = mapper.map(Person(date_of_birth=instant), PersonDto)
    assert dto.date_of_birth == datetime(2024, 1, 15, 10, 0)
    assert dto.date_of_birth.tzinfo is None


def test_person_to_person_dto_converts_created_date(mapper):
    dto = mapper.map(Person(created_date=datetime(2024, 6, 20, 18, 0, tzinfo=UTC)), PersonDto)
    assert dto.created_date == datetime(2024, 6, 20, 13, 0)


# -- Appointment --------------------------------------------------------------


def test_appointment_dto_to_appointment_converts_dates(mapper):
    appointment = mapper.map(
        AppointmentDto(
            created_date=datetime(2024, 2, 10, 9, 0),
            reminder_date=datetime(2024, 8, 1, 15, 30),
        ),
        Appointment,
    )
    assert appointment.created_date == datetime(2024, 2, 10, 15, 0, tzinfo=UTC)
    assert appointment.reminder_date == datetime(2024, 8, 1, 20, 30, tzinfo=UTC)


def test_appointment_dto_to_appointment_time_passes_through(mapper):
    original = datetime(2024, 5, 20, 14, 0)
    appointment = mapper.map(AppointmentDto(appointment_time=original), Appointment)
    assert appointment.appointment_time == original
    assert appointment.appointment_time.tzinfo is None


def test_appointment_to_appointment_dto_converts_dates(mapper):
    dto = mapper.map(
        Appointment(
            created_date=datetime(2024, 2, 10, 15, 0, tzinfo=UTC),
            reminder_date=datetime(2024, 8, 1, 20, 30, tzinfo=UTC),
        ),
        AppointmentDto,
    )
    assert dto.created_date == datetime(2024, 2, 10, 9, 0)
    assert dto.reminder_date == datetime(2024, 8, 1, 15, 30)


def test_appointment_to_appointment_dto_time_passes_through(mapper):
    original = datetime(2024, 5, 20, 14, 0)
    dto = mapper.map(Appointment(appointment_time=original), AppointmentDto)
    assert dto.appointment_time == original


# -- Round trips ---------------------------------------------------------------


def test_person_round_trip_dto_to_domain_and_back(mapper):
    dto = PersonDto(
        id=42,
        first_name="John",
        last_name="Doe",
        date_of_birth=datetime(2024, 1, 15, 10, 0),
        created_date=datetime(2024, 3, 1, 8, 0),
        last_modified_date=datetime(2024, 6, 15, 12, 0),
    )
    round_tripped = mapper.map(mapper.map(dto, Person), PersonDto)
    assert round_tripped == dto


def test_appointment_round_trip_dto_to_domain_and_back(mapper):
    dto = AppointmentDto(
        id=99,
        person_id=42,
        description="Annual checkup",
        appointment_time=datetime(2024, 5, 20, 14, 0),
        created_date=datetime(2024, 4, 1, 9, 0),
        reminder_date=datetime(2024, 5, 19, 14, 0),
    )
    round_tripped = mapper.map(mapper.map(dto, Appointment), AppointmentDto)
    assert round_tripped == dto


def test_person_round_trip_domain_to_dto_and_back(mapper):
    person = Person(
        id=7,
        first_name="Jane",
        last_name="Smith",
        date_of_birth=datetime(1990, 6, 15, 16, 0, tzinfo=UTC),
        created_date=datetime(2024, 1, 1, 6, 0, tzinfo=UTC),
        last_modified_date=datetime(2024, 7, 1, 18, 0, tzinfo=UTC),
    )
    round_tripped = mapper.map(mapper.map(person, PersonDto), Person)
    for name in ("id", "first_name", "last_name", "date_of_birth", "created_date", "last_modified_date"):
        assert getattr(round_tripped, name) == getattr(person, name)
    assert round_tripped.full_name == "Smith, Jane"


def test_appointment_round_trip_domain_to_dto_and_back(mapper):
    appointment = Appointment(
        id=1,
        person_id=7,
        description="Follow-up",
        appointment_time=datetime(2024, 9, 10, 13, 0),
        created_date=datetime(2024, 8, 1, 20, 0, tzinfo=UTC),
        reminder_date=datetime(2024, 9, 9, 20, 0, tzinfo=UTC),
    )
    round_tripped = mapper.map(mapper.map(appointment, AppointmentDto), Appointment)
    assert_equivalent_excluding_converted_dates(round_tripped, appointment)
    assert round_tripped == appointment


# -- DST edges and offsets -----------------------------------------------------


def test_hour_before_spring_forward(mapper, central):
    local = datetime(2024, 3, 10, 1, 30)
    person = mapper.map(PersonDto(created_date=local), Person)
    assert person.created_date == central.to_utc(local)
    assert person.created_date == datetime(2024, 3, 10, 7, 30, tzinfo=UTC)


def test_spring_forward_gap_resolves_to_standard_offset(mapper):
    person = mapper.map(PersonDto(created_date=datetime(2024, 3, 10, 2, 30)), Person)
    assert person.created_date == datetime(2024, 3, 10, 8, 30, tzinfo=UTC)


def test_fall_back_overlap_resolves_to_standard_offset(mapper):
    person = mapper.map(PersonDto(created_date=datetime(2024, 11, 3, 1, 30)), Person)
    assert person.created_date == datetime(2024, 11, 3, 7, 30, tzinfo=UTC)


def test_standard_time_offset(mapper):
    person = mapper.map(PersonDto(date_of_birth=datetime(2024, 12, 25, 12, 0)), Person)
    assert person.date_of_birth == datetime(2024, 12, 25, 18, 0, tzinfo=UTC)


def test_daylight_time_offset(mapper):
    person = mapper.map(PersonDto(date_of_birth=datetime(2024, 7, 4, 12, 0)), Person)
    assert person.date_of_birth == datetime(2024, 7, 4, 17, 0, tzinfo=UTC)


# -- Non-date fields and full name --------------------------------------------


def test_person_non_date_fields_copied(mapper):
    person = mapper.map(PersonDto(id=123, first_name="Alice", last_name="Johnson"), Person)
    assert (person.id, person.first_name, person.last_name) == (123, "Alice", "Johnson")
    assert person.date_of_birth is None


def test_appointment_non_date_fields_copied(mapper):
    appointment = mapper.map(
        AppointmentDto(id=456, person_id=123, description="Dental cleaning"), Appointment
    )
    assert (appointment.id, appointment.person_id, appointment.description) == (
        456,
        123,
        "Dental cleaning",
    )


def test_full_name_resolved_via_formatter(mapper):
    person = mapper.map(PersonDto(first_name="Alice", last_name="Johnson"), Person)
    assert person.full_name == "Johnson, Alice"


def test_full_name_with_zone_label(settings):
    registry = build_mapper(settings, formatter=FullNameFormatter(StaticZoneLabels()))
    person = registry.map(PersonDto(first_name="Alice", last_name="Johnson"), Person)
    assert person.full_name == "Johnson, Alice : Central"


def test_full_name_label_from_settings():
    settings = Settings(FULL_NAME_WITH_ZONE_LABEL=True, ZONE_LABEL_PROVIDER_ID=3)
    registry = build_mapper(settings)
    person = registry.map(PersonDto(first_name="Bo", last_name="Li"), Person)
    assert person.full_name == "Li, Bo : Eastern"


def test_full_name_never_timestamp_converted_nor_copied_back(mapper):
    dto = mapper.map(Person(first_name="A", last_name="B", full_name="B, A"), PersonDto)
    assert "full_name" not in PersonDto.model_fields
    assert dto.first_name == "A"


# -- Build-time configuration --------------------------------------------------


def test_unknown_zone_fails_at_build_time(settings):
    with pytest.raises(ConfigurationError):
        build_mapper(settings, zone_id="Mars/Olympus_Mons")


def test_windows_zone_name_accepted():
    registry = build_mapper(Settings(LOCAL_TIMEZONE="Central Standard Time"))
    person = registry.map(PersonDto(date_of_birth=datetime(2024, 1, 15, 10, 0)), Person)
    assert person.date_of_birth == datetime(2024, 1, 15, 16, 0, tzinfo=UTC)


def test_other_zone_uses_its_own_rules():
    registry = build_mapper(Settings(LOCAL_TIMEZONE="America/New_York"))
    person = registry.map(PersonDto(date_of_birth=datetime(2024, 1, 15, 10, 0)), Person)
    assert person.date_of_birth == datetime(2024, 1, 15, 15, 0, tzinfo=UTC)


def test_passthrough_from_settings(settings):
    registry = build_mapper(settings, passthrough=["created_date"])
    appointment = registry.map(
        AppointmentDto(
            appointment_time=datetime(2024, 5, 20, 14, 0),
            created_date=datetime(2024, 4, 1, 9, 0),
        ),
        Appointment,
    )
    assert appointment.created_date == datetime(2024, 4, 1, 9, 0)
    assert appointment.appointment_time == datetime(2024, 5, 20, 19, 0, tzinfo=UTC)


def test_map_record_uses_settings_backed_default_mapper(monkeypatch, tmp_path):
    from zone_mapper import config as config_module
    from zone_mapper import mapper as mapper_module

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOCAL_TIMEZONE", "America/Los_Angeles")
    config_module.get_settings.cache_clear()
    mapper_module.get_default_mapper.cache_clear()
    try:
        person = mapper_module.map_record(PersonDto(date_of_birth=datetime(2024, 1, 15, 10, 0)), Person)
        assert person.date_of_birth == datetime(2024, 1, 15, 18, 0, tzinfo=UTC)
        assert mapper_module.get_default_mapper() is mapper_module.get_default_mapper()
    finally:
        config_module.get_settings.cache_clear()
        mapper_module.get_default_mapper.cache_clear()


def test_build_mapper_accepts_single_passthrough_name(settings):
    registry = build_mapper(settings, passthrough="appointment_time")
    assert registry.passthrough == frozenset({"appointment_time"})
    original = datetime(2024, 5, 20, 14, 0)
    appointment = registry.map(AppointmentDto(appointment_time=original), Appointment)
    assert appointment.appointment_time == original

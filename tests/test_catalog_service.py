from datetime import date

import pytest

from BackEnd.core.errors import NotFoundError, ValidationError


def test_create_exam_strips_fields(catalog, clock):
    exam = catalog.create_exam("  INSS Técnico ", board=" Cebraspe ", role="", exam_date=date(2027, 3, 14))

    assert exam.id is not None
    assert exam.name == "INSS Técnico"
    assert exam.board == "Cebraspe"
    assert exam.role is None
    assert exam.exam_date == date(2027, 3, 14)
    assert exam.status == "ativo"
    assert exam.created_at == clock.now


@pytest.mark.parametrize("name", ["", "   ", None])
def test_exam_name_is_required(catalog, name):
    with pytest.raises(ValidationError):
        catalog.create_exam(name)


def test_exam_status_must_be_known(catalog):
    with pytest.raises(ValidationError):
        catalog.create_exam("TCU", status="arquivado")


def test_subjects_are_ordered_by_registration(catalog, exam, subjects):
    listed = catalog.subjects(exam.id)

    assert [s.name for s in listed] == ["Português", "Direito Constitucional", "Informática"]
    assert [s.order for s in listed] == [0, 1, 2]


def test_subject_needs_existing_exam(catalog):
    with pytest.raises(NotFoundError):
        catalog.create_subject(42, "Português")


@pytest.mark.parametrize("kwargs", [
    {"name": ""},
    {"name": "Português", "priority": "urgente"},
    {"name": "Português", "color": "blue"},
    {"name": "Português", "color": "#12345"},
    {"name": "Português", "cycle_goal_hours": -1},
])
def test_subject_validation(catalog, exam, kwargs):
    with pytest.raises(ValidationError):
        catalog.create_subject(exam.id, **kwargs)


def test_exams_listing(catalog, exam):
    other = catalog.create_exam("PC-SP Escrivão")

    assert {e.id for e in catalog.exams()} == {exam.id, other.id}

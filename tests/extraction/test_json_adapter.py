from __future__ import annotations

from datetime import date
import json
from pathlib import Path

import pytest

from weekmenu.extraction.adapters.json_adapter import JSONWeekAdapter
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.pipeline import extract_schedule, extract_schedule_from_path


def _write(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_json_adapter_reads_list_days(tmp_path: Path) -> None:
    path = _write(tmp_path / "week.json", [["2023-06-05", "Soup", "Steak frites"], ["2023-06-06", "Salad"]])

    document = JSONWeekAdapter().extract(path)

    assert [token.text for token in document.tokens] == [
        "2023-06-05",
        "- Soup",
        "- Steak frites",
        "2023-06-06",
        "- Salad",
    ]
    assert [token.line for token in document.tokens] == [1, 2, 3, 4, 5]
    assert document.source_path == str(path)


def test_json_adapter_emits_course_headings(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "week.json",
        [
            {
                "date": "2023-06-05",
                "starters_without_usual": ["Soup"],
                "mains": ["Steak frites"],
                "sides": [],
                "desserts": ["Fruit"],
            }
        ],
    )

    document = JSONWeekAdapter().extract(path)

    assert [token.text for token in document.tokens] == [
        "2023-06-05",
        "starter",
        "- Soup",
        "main",
        "- Steak frites",
        "dessert",
        "- Fruit",
    ]


def test_json_week_feeds_the_pipeline_with_categories(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "week.json",
        [
            {"date": "2023-06-05", "starters": ["Soup"], "mains": ["Steak frites"], "cheeses": ["Comté"]},
            {"date": "2023-06-06", "mains": ["Fish"]},
        ],
    )

    schedule = extract_schedule_from_path(path, week_start=date(2023, 6, 5))

    assert [day.date for day in schedule.days] == [date(2023, 6, 5), date(2023, 6, 6)]
    first = schedule.days[0]
    assert first.names == ("Soup", "Steak frites", "Comté")
    assert [dish.category for dish in first.dishes] == ["starter", "main", "cheese"]
    assert schedule.days[1].names == ("Fish",)


def test_json_headings_follow_custom_keywords(tmp_path: Path) -> None:
    settings = ExtractionSettings(category_keywords={"entrées": "starter"})
    path = _write(tmp_path / "week.json", [{"date": "2023-06-05", "starters": ["Soup"], "mains": ["Fish"]}])

    document = JSONWeekAdapter(settings).extract(path)
    schedule = extract_schedule(document, settings, week_start=date(2023, 6, 5))

    assert [token.text for token in document.tokens] == ["2023-06-05", "entrées", "- Soup", "- Fish"]
    assert schedule.days[0].dishes[0].category == "starter"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"date": "2023-06-05"}, "list of days"),
        (["2023-06-05"], "list or an object"),
        ([[]], "start with its date"),
        ([{"mains": ["Fish"]}], "missing its 'date'"),
        ([{"date": "2023-06-05", "mains": "Fish"}], "'mains' must be a list of strings"),
        ([["2023-06-05", 3]], "dishes must be a list of strings"),
    ],
)
def test_json_adapter_rejects_malformed_weeks(tmp_path: Path, payload, message: str) -> None:
    path = _write(tmp_path / "week.json", payload)

    with pytest.raises(ValueError, match=message):
        JSONWeekAdapter().extract(path)


def test_json_adapter_supports_by_suffix_or_leading_bracket() -> None:
    adapter = JSONWeekAdapter()

    assert adapter.supports(Path("WEEK.JSON"))
    assert adapter.supports(Path("upload.bin"), b'\n [["2023-06-05"]]')
    assert not adapter.supports(Path("upload.bin"), b"Monday\n- Soup")
    assert not adapter.supports(Path("menu.txt"))

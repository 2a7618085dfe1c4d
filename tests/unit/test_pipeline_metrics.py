from datetime import UTC, datetime

from app.features.analytics.domain.models import (
    InterviewRecord,
    JobRecord,
    OfferRecord,
    StatusChange,
)
from app.features.analytics.metrics.service import (
    attach_status_history,
    build_job_analytics,
    calculate_applications_sent,
    calculate_average_time_in_stage,
    calculate_conversion_rates,
    calculate_deadline_adherence,
    calculate_funnel_counts,
    calculate_interviews_scheduled,
    calculate_median_time_to_response,
    calculate_offers_received,
    calculate_time_to_offer,
    get_monthly_applications,
    get_upcoming_deadlines,
    normalize_status,
)

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=UTC)


def _job(job_id: str, status: str, history=None, **extra) -> JobRecord:
    return JobRecord(id=job_id, status=status, status_history=history or [], **extra)


def _change(status: str, changed_at: str, job_id: str | None = None) -> StatusChange:
    return StatusChange.model_validate(
        {"to_status": status, "changed_at": changed_at, "job_id": job_id}
    )


def test_normalize_status_variants():
    assert normalize_status("Phone Screen") == "phone_screen"
    assert normalize_status("phone-screen") == "phone_screen"
    assert normalize_status("Wishlist") == "interested"
    assert normalize_status(None) == ""


def test_applications_sent_counts_applied_and_beyond():
    jobs = [
        _job("1", "Applied"),
        _job("2", "Interview"),
        _job("3", "Wishlist"),
        _job("4", "Offer"),
        _job("5", "rejected"),
    ]

    assert calculate_applications_sent(jobs) == 4
    assert calculate_applications_sent([]) == 0


def test_interviews_scheduled_needs_a_date():
    interviews = [
        InterviewRecord(id="1", scheduled_start=datetime(2025, 1, 15, 10, tzinfo=UTC)),
        InterviewRecord(id="2", interview_date=datetime(2025, 1, 16, 14, tzinfo=UTC)),
        InterviewRecord(id="3"),
    ]

    assert calculate_interviews_scheduled(interviews) == 2


def test_offers_received_prefers_explicit_offers():
    jobs = [_job("1", "Offer"), _job("2", "Interview"), _job("3", "offer")]

    assert calculate_offers_received(jobs) == 2
    assert calculate_offers_received(jobs, [OfferRecord(id="o1"), OfferRecord(id="o2"), OfferRecord(id="o3")]) == 3


def test_conversion_rates():
    jobs = [
        _job("1", "Applied"),
        _job("2", "Applied"),
        _job("3", "Interview"),
        _job("4", "Offer"),
    ]

    rates = calculate_conversion_rates(jobs)

    assert rates.applied_to_interview == 50
    assert rates.interview_to_offer == 50
    assert rates.applied_to_offer == 25


def test_conversion_rates_with_no_applications():
    rates = calculate_conversion_rates([])

    assert (rates.applied_to_interview, rates.interview_to_offer, rates.applied_to_offer) == (0, 0, 0)


def test_median_time_to_response():
    jobs = [_job("job-1", "Interview"), _job("job-2", "Interview"), _job("job-3", "Rejected")]
    history = [
        _change("Applied", "2025-01-01T10:00:00Z", "job-1"),
        _change("Interview", "2025-01-08T10:00:00Z", "job-1"),
        _change("Applied", "2025-01-01T10:00:00Z", "job-2"),
        _change("Interview", "2025-01-06T10:00:00Z", "job-2"),
        _change("Applied", "2025-01-01T10:00:00Z", "job-3"),
        _change("Rejected", "2025-01-04T10:00:00Z", "job-3"),
    ]

    assert calculate_median_time_to_response(jobs, history) == 5


def test_median_time_to_response_without_responses():
    jobs = [_job("job-1", "Applied")]
    history = [_change("Applied", "2025-01-01T10:00:00Z", "job-1")]

    assert calculate_median_time_to_response(jobs, history) is None


def test_average_time_in_stage():
    jobs = [
        _job(
            "1",
            "Interview",
            [
                _change("Applied", "2025-01-01T00:00:00Z"),
                _change("Interview", "2025-01-05T00:00:00Z"),
            ],
        ),
        _job(
            "2",
            "Offer",
            [
                _change("Applied", "2025-01-01T00:00:00Z"),
                _change("Interview", "2025-01-11T00:00:00Z"),
                _change("Offer", "2025-01-13T00:00:00Z"),
            ],
        ),
    ]

    assert calculate_average_time_in_stage(jobs) == {"applied": 7, "interview": 2}


def test_deadline_adherence():
    on_time = _job(
        "1",
        "Applied",
        [_change("Applied", "2025-01-01T00:00:00Z")],
        application_deadline="2025-01-10",
    )
    late = _job(
        "2",
        "Applied",
        [_change("Applied", "2025-01-20T00:00:00Z")],
        application_deadline="2025-01-10",
    )
    never_applied = _job("3", "Interested", application_deadline="2025-01-10")

    assert calculate_deadline_adherence([on_time, late, never_applied]) == 33
    assert calculate_deadline_adherence([_job("4", "Applied")]) == 100


def test_time_to_offer_averages_offer_jobs_only():
    offer = _job(
        "1",
        "Offer",
        [
            _change("Applied", "2025-01-01T00:00:00Z"),
            _change("Offer", "2025-01-21T00:00:00Z"),
        ],
    )
    interviewing = _job("2", "Interview", [_change("Applied", "2025-01-01T00:00:00Z")])

    assert calculate_time_to_offer([offer, interviewing]) == 20
    assert calculate_time_to_offer([interviewing]) is None


def test_upcoming_deadlines_skip_archived_and_past():
    jobs = [
        _job("soon", "Interested", job_title="A", company_name="Acme", application_deadline="2025-03-20"),
        _job("later", "Interested", job_title="B", application_deadline="2025-04-10"),
        _job("past", "Interested", application_deadline="2025-03-01"),
        _job("archived", "Interested", application_deadline="2025-03-18", is_archived=True),
        _job("far", "Interested", application_deadline="2025-06-01"),
    ]

    upcoming = get_upcoming_deadlines(jobs, now=NOW)

    assert [item.job_id for item in upcoming] == ["soon", "later"]
    assert upcoming[0].days_until == 5
    assert upcoming[0].company == "Acme"
    assert upcoming[1].company == "Unknown"


def test_monthly_applications_buckets_last_months():
    jobs = [
        _job("1", "Applied", [_change("Applied", "2025-03-02T00:00:00Z")]),
        _job("2", "Applied", [_change("Applied", "2025-01-20T00:00:00Z")]),
        _job("3", "Applied", [_change("Applied", "2024-06-01T00:00:00Z")]),
        _job("4", "Interested"),
    ]

    months = get_monthly_applications(jobs, months=3, now=NOW)

    assert [(m.month, m.count) for m in months] == [
        ("Jan 2025", 1),
        ("Feb 2025", 0),
        ("Mar 2025", 1),
    ]


def test_monthly_applications_cross_year_boundary():
    months = get_monthly_applications([], months=6, now=NOW)

    assert [m.month for m in months] == [
        "Oct 2024",
        "Nov 2024",
        "Dec 2024",
        "Jan 2025",
        "Feb 2025",
        "Mar 2025",
    ]


def test_funnel_counts_cover_every_stage():
    jobs = [
        _job("1", "Wishlist"),
        _job("2", "Applied"),
        _job("3", "Phone Screen"),
        _job("4", "Interview"),
        _job("5", "Accepted"),
        _job("6", "Withdrawn"),
    ]

    assert calculate_funnel_counts(jobs) == {
        "interested": 1,
        "applied": 1,
        "phone_screen": 1,
        "interview": 1,
        "offer": 1,
        "rejected": 1,
    }


def test_attach_status_history_orders_table_rows_and_keeps_inline_history():
    inline = _job("2", "Applied", [_change("Applied", "2025-01-02T00:00:00Z")])
    jobs = [_job("1", "Interview"), inline]
    history = [
        _change("Interview", "2025-01-09T00:00:00Z", "1"),
        _change("Applied", "2025-01-01T00:00:00Z", "1"),
    ]

    attached = attach_status_history(jobs, history)

    assert [c.status for c in attached[0].status_history] == ["Applied", "Interview"]
    assert attached[1].status_history == inline.status_history


def test_job_record_accepts_inline_history_keys():
    job = JobRecord.model_validate(
        {
            "id": "1",
            "status": "Applied",
            "is_archived": None,
            "status_history": [{"status": "Applied", "changedAt": "2025-01-01T00:00:00Z"}],
        }
    )

    assert job.is_archived is False
    assert job.status_history[0].status == "Applied"


def test_build_job_analytics_summary():
    jobs = [
        _job(
            "1",
            "Offer",
            [
                _change("Applied", "2025-02-01T00:00:00Z"),
                _change("Offer", "2025-02-11T00:00:00Z"),
            ],
            application_deadline="2025-03-25",
        ),
        _job("2", "Applied", [_change("Applied", "2025-03-01T00:00:00Z")]),
        _job("3", "Interested"),
    ]

    analytics = build_job_analytics(jobs, now=NOW)

    assert analytics.total == 3
    assert analytics.by_status == {"offer": 1, "applied": 1, "interested": 1}
    assert analytics.response_rate == 50
    assert analytics.time_to_offer == 10
    assert analytics.deadline_adherence == 100
    assert analytics.avg_time_in_stage == {"applied": 10}
    assert [d.job_id for d in analytics.upcoming_deadlines] == ["1"]
    assert len(analytics.monthly_applications) == 6
    assert analytics.monthly_applications[-1].count == 1

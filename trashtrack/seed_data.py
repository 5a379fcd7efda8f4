"""Demo reports for exercising the dashboards without real submissions."""
from trashtrack.models.report import ReportStatus
from trashtrack.report_store import ALLOWED_TRANSITIONS, ReportStore

# (draft, target status, after-cleanup photo)
MOCK_REPORTS = [
    (
        {
            "title": "Garbage pile near market",
            "description": "Large pile of mixed waste blocking half the footpath outside the vegetable market.",
            "category": "roadside",
            "severity": 4,
            "location": {
                "latitude": 28.6304,
                "longitude": 77.2177,
                "address": "Connaught Place, Block A",
                "city": "Delhi",
                "postal_code": "110001",
            },
            "image_url": "https://images.unsplash.com/photo-1530587191325-3db32d826c18",
            "ai_analysis": "Sharp objects visible. Avoid direct contact.",
        },
        ReportStatus.PENDING,
        None,
    ),
    (
        {
            "title": "Overflowing community bin",
            "description": "Municipal bin has not been emptied for days; waste spilling onto the road.",
            "category": "bin-overflow",
            "severity": 3,
            "location": {
                "latitude": 18.922,
                "longitude": 72.823,
                "address": "Marine Drive promenade",
                "city": "Mumbai",
                "postal_code": "400020",
            },
            "image_url": "https://images.unsplash.com/photo-1605600659908-0ef719419d41",
        },
        ReportStatus.ASSIGNED,
        None,
    ),
    (
        {
            "title": "Plastic bottles on beach",
            "description": "Hundreds of plastic bottles washed up along the shoreline.",
            "category": "plastic",
            "severity": 2,
            "location": {
                "latitude": 13.05,
                "longitude": 80.2824,
                "address": "Marina Beach",
                "city": "Chennai",
                "postal_code": "600005",
            },
            "image_url": "https://images.unsplash.com/photo-1618477461853-cf6ed80faba5",
        },
        ReportStatus.IN_PROGRESS,
        None,
    ),
    (
        {
            "title": "Construction debris dumped",
            "description": "Bricks and cement bags left on the service lane after renovation work.",
            "category": "construction",
            "severity": 5,
            "location": {
                "latitude": 12.971,
                "longitude": 77.594,
                "address": "MG Road service lane",
                "city": "Bangalore",
                "postal_code": "560001",
            },
            "image_url": "https://images.unsplash.com/photo-1590579491624-f98f36d4c763",
            "ai_analysis": "Debris blocking traffic lane.",
        },
        ReportStatus.RESOLVED,
        "https://images.unsplash.com/photo-1558611848-73f7eb4001a1",
    ),
    (
        {
            "title": "Rotting food waste",
            "description": "Wet waste left near the bus stop attracting stray animals.",
            "category": "wet",
            "severity": 3,
            "location": {
                "latitude": 28.5747,
                "longitude": 77.356,
                "address": "Noida Sector 18 bus stop",
                "city": "Delhi",
                "postal_code": "201301",
            },
            "image_url": "https://images.unsplash.com/photo-1604187351574-c75ca79f5807",
        },
        ReportStatus.RESOLVED,
        "https://images.unsplash.com/photo-1532996122724-e3c354a0b15b",
    ),
]


def seed_all(store: ReportStore) -> dict[str, int]:
    """Replace the store contents with the demo reports, walking each through its lifecycle."""
    store.clear()
    for draft, target, after_image in MOCK_REPORTS:
        report = store.create_report(draft)
        status = report.status
        while status != target:
            status = ALLOWED_TRANSITIONS[status]
            store.update_status(report.id, status, after_image)
    return {
        "reports": len(store),
        "resolved": len(store.list_by_status(ReportStatus.RESOLVED)),
    }

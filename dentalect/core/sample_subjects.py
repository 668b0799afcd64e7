"""Sample Subjects: starter content offered to a new owner.

Invariants:
    - Entries carry no ids; the store assigns them when seeding
"""

SAMPLE_SUBJECTS: list[dict] = [
    {
        "name": "Anatomy",
        "files": [
            {
                "name": "Cranial Nerves.txt",
                "content": "The twelve cranial nerves...",
            },
            {
                "name": "Muscles of Mastication.txt",
                "content": "The four primary muscles...",
            },
        ],
    },
]

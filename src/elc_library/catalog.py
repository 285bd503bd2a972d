"""
Starter collection for the ELC Library.

Used the first time a storage area is opened, before any catalog has been
saved. Every title starts out available.
"""

from .models import Book, BookCategory, BookLevel

_STARTER_TITLES: list[tuple[str, str, str, BookCategory, BookLevel, str]] = [
    (
        "Speakout Starter Teacher's Book",
        "Frances Eales, Steve Oakes",
        "9781447976806",
        BookCategory.TEACHER_RESOURCE,
        BookLevel.STARTER_ELEMENTARY,
        "Lesson notes, extra activities and tests for Speakout Starter.",
    ),
    (
        "Speakout Intermediate Teacher's Book",
        "J. J. Wilson, Antonia Clare",
        "9781447976851",
        BookCategory.TEACHER_RESOURCE,
        BookLevel.INTERMEDIATE,
        "Teaching notes and photocopiable resources for Speakout Intermediate.",
    ),
    (
        "face2face Upper Intermediate Teacher's Book",
        "Chris Redston, Gillie Cunningham",
        "9781107679436",
        BookCategory.TEACHER_RESOURCE,
        BookLevel.ADVANCED,
        "Step-by-step notes and class activities for face2face Upper Intermediate.",
    ),
    (
        "Global Advanced Teacher's Book",
        "Lindsay Clandfield, Kate Pickering",
        "9780230033276",
        BookCategory.TEACHER_RESOURCE,
        BookLevel.ADVANCED,
        "Teacher's notes and resource materials for Global Advanced.",
    ),
    (
        "English for Medicine in Higher Education Studies",
        "Patrick Fitzgerald, Marie McCullagh, Ros Wright",
        "9781859644478",
        BookCategory.ESP,
        BookLevel.ADVANCED,
        "Academic skills and medical vocabulary for students of medicine.",
    ),
    (
        "Professional English in Use: Law",
        "Gillian D. Brown, Sally Rice",
        "9780521685429",
        BookCategory.ESP,
        BookLevel.ADVANCED,
        "Legal vocabulary in context, from contract law to litigation.",
    ),
    (
        "Cambridge English for Nursing Intermediate Plus",
        "Virginia Allum, Patricia McGarr",
        "9780521715409",
        BookCategory.ESP,
        BookLevel.INTERMEDIATE,
        "Communication skills for nurses working in English.",
    ),
    (
        "Business Result Intermediate Student's Book",
        "Kate Baade, Christopher Holloway",
        "9780194739481",
        BookCategory.ESP,
        BookLevel.INTERMEDIATE,
        "Business English course built around real workplace tasks.",
    ),
    (
        "English Grammar in Use",
        "Raymond Murphy",
        "9781108457651",
        BookCategory.GENERAL_ENGLISH,
        BookLevel.INTERMEDIATE,
        "Self-study reference and practice for intermediate learners.",
    ),
    (
        "Essential Grammar in Use",
        "Raymond Murphy",
        "9781107480551",
        BookCategory.GENERAL_ENGLISH,
        BookLevel.STARTER_ELEMENTARY,
        "Grammar reference and practice for elementary learners.",
    ),
    (
        "Headway Pre-Intermediate Student's Book",
        "Liz Soars, John Soars",
        "9780194529150",
        BookCategory.GENERAL_ENGLISH,
        BookLevel.STARTER_ELEMENTARY,
        "General English course for young adults and adults.",
    ),
    (
        "Academic Vocabulary in Use",
        "Michael McCarthy, Felicity O'Dell",
        "9781107591660",
        BookCategory.ACADEMIC_SKILLS,
        BookLevel.ADVANCED,
        "Vocabulary for academic reading and writing.",
    ),
    (
        "Oxford EAP Intermediate/B1+",
        "Edward de Chazal, Louis Rogers",
        "9780194001793",
        BookCategory.ACADEMIC_SKILLS,
        BookLevel.INTERMEDIATE,
        "English for Academic Purposes course for university students.",
    ),
    (
        "Writing Academic English",
        "Alice Oshima, Ann Hogue",
        "9780131523593",
        BookCategory.ACADEMIC_SKILLS,
        BookLevel.ADVANCED,
        "Paragraph and essay writing for academic settings.",
    ),
    (
        "Learning Teaching",
        "Jim Scrivener",
        "9780230729841",
        BookCategory.PEDAGOGY,
        BookLevel.PROFESSIONAL,
        "The essential guide to English language teaching.",
    ),
    (
        "The Practice of English Language Teaching",
        "Jeremy Harmer",
        "9781447980254",
        BookCategory.PEDAGOGY,
        BookLevel.PROFESSIONAL,
        "Methodology handbook covering theory and classroom practice.",
    ),
    (
        "How to Teach Grammar",
        "Scott Thornbury",
        "9780582339329",
        BookCategory.PEDAGOGY,
        BookLevel.PROFESSIONAL,
        "Practical approaches to presenting and practising grammar.",
    ),
    (
        "Testing for Language Teachers",
        "Arthur Hughes",
        "9780521484954",
        BookCategory.TESTING,
        BookLevel.PROFESSIONAL,
        "Principles of designing reliable and valid language tests.",
    ),
    (
        "Language Assessment: Principles and Classroom Practices",
        "H. Douglas Brown, Priyanvada Abeywickrama",
        "9780134860220",
        BookCategory.TESTING,
        BookLevel.PROFESSIONAL,
        "Classroom-based assessment of the four skills.",
    ),
    (
        "Cambridge IELTS 17 Academic",
        "Cambridge University Press",
        "9781108933810",
        BookCategory.TESTING,
        BookLevel.ADVANCED,
        "Authentic IELTS Academic practice tests with answers.",
    ),
]


def starter_catalog() -> list[Book]:
    """Build the starter collection with ids ``elc-001``, ``elc-002``, ..."""
    return [
        Book(
            id=f"elc-{index:03d}",
            title=title,
            author=author,
            isbn=isbn,
            category=category,
            level=level,
            description=description,
        )
        for index, (title, author, isbn, category, level, description) in enumerate(
            _STARTER_TITLES, start=1
        )
    ]

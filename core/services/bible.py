from django.core.exceptions import ValidationError

from core.models import BibleChapter


def list_bible_books():
    books = {}
    for row in BibleChapter.objects.order_by("book_order", "chapter"):
        book = books.setdefault(
            row.book,
            {
                "id": len(books) + 1,
                "name": row.book,
                "testament": row.testament,
                "abbreviation": row.abbreviation,
                "chapters": [],
            },
        )
        book["chapters"].append({"n": row.chapter, "v": row.verse_count})
    return list(books.values())


def check_citation_bounds(citation):
    """Reject chapters/verses the catalog knows do not exist.

    An empty catalog disables the check.
    """
    if not BibleChapter.objects.exists():
        return
    chapters = {
        row.chapter: row.verse_count for row in BibleChapter.objects.filter(book=citation.book)
    }
    if not chapters:
        raise ValidationError({"book": f"El libro {citation.book} no existe."})
    for field, chapter, verse in (
        ("start", citation.start_chapter, citation.start_verse),
        ("end", citation.end_chapter, citation.end_verse),
    ):
        if chapter not in chapters:
            raise ValidationError({f"{field}_chapter": f"{citation.book} no tiene capitulo {chapter}."})
        if verse > chapters[chapter]:
            raise ValidationError(
                {f"{field}_verse": f"{citation.book} {chapter} no tiene versiculo {verse}."}
            )

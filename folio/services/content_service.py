"""Content service: discovers Markdown files, indexes them and answers listing queries."""

import hashlib
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from pydantic_core import to_jsonable_python
from sqlalchemy.orm import Session

from folio.config import get_settings
from folio.exceptions import (
    DatabaseError,
    DuplicateError,
    FrontMatterError,
    NotFoundError,
    ValidationError,
)
from folio.frontmatter import ParsedDocument, parse_front_matter
from folio.models.document import Document
from folio.models.navigation import NavigationEntry
from folio.storage.repositories import (
    DocumentRepository,
    NavigationRepository,
    TagRepository,
)

logger = logging.getLogger(__name__)

INDEX_NAMES = ("index", "_index")


def path_slug(source_path: str) -> str:
    """Slug a document gets from its path: suffix dropped, trailing index file folded."""
    parts = PurePosixPath(source_path).with_suffix("").parts
    if len(parts) > 1 and parts[-1].lower() in INDEX_NAMES:
        parts = parts[:-1]
    return "/".join(parts)


@dataclass
class ScanResult:
    """Outcome of indexing the content directory."""

    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)
    duplicate_titles: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class _Entry:
    source: str
    digest: str
    slug: str
    parsed: Optional[ParsedDocument]


class ContentService:
    """Service layer over the content directory and its index."""

    SLUG_MAX_LENGTH = 255
    LIMIT_MAX = 1000

    def __init__(
        self,
        session: Session,
        content_dir: str | Path | None = None,
        extensions: list[str] | None = None,
        strict: bool | None = None,
    ):
        """
        Initialize content service.

        Args:
            session: SQLAlchemy database session
            content_dir: Directory holding the documents. Defaults to settings.
            extensions: File suffixes treated as documents. Defaults to settings.
            strict: Raise on the first malformed file instead of collecting errors
        """
        settings = get_settings()
        self.session = session
        self.content_dir = Path(content_dir if content_dir is not None else settings.content_dir)
        self.extensions = tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in (extensions or settings.content_extensions)
        )
        self.strict = settings.strict_front_matter if strict is None else strict
        self.document_repo = DocumentRepository(session)
        self.tag_repo = TagRepository(session)
        self.navigation_repo = NavigationRepository(session)

    # Discovery and parsing

    def discover(self) -> list[Path]:
        """
        List document files under the content directory, sorted by path.

        Hidden files and anything inside hidden directories are skipped.

        Raises:
            ValidationError: If the content directory does not exist
        """
        if not self.content_dir.is_dir():
            raise ValidationError(
                f"Content directory '{self.content_dir}' does not exist", "content_dir"
            )

        files = []
        for path in sorted(self.content_dir.rglob("*")):
            relative = path.relative_to(self.content_dir)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if path.is_file() and path.suffix.lower() in self.extensions:
                files.append(path)
        return files

    def source_name(self, path: Path) -> str:
        """Path of a file relative to the content directory, POSIX style."""
        return path.relative_to(self.content_dir).as_posix()

    def slug_for(self, path: Path, parsed: ParsedDocument) -> str:
        """Derive the document slug: front-matter override, else its path."""
        if parsed.front_matter.slug:
            return parsed.front_matter.slug
        return path_slug(self.source_name(path))

    def load(self, path: Path) -> ParsedDocument:
        """
        Read and parse a single document file.

        Raises:
            FrontMatterError: If the file is not UTF-8 or its front-matter is invalid
        """
        source = self.source_name(path)
        return self._parse_bytes(path.read_bytes(), source)

    def read_collection(self) -> list[ParsedDocument]:
        """
        Parse every document file without touching the index.

        Malformed files are logged and skipped unless strict mode is on.
        """
        documents = []
        for path in self.discover():
            try:
                documents.append(self.load(path))
            except FrontMatterError as e:
                if self.strict:
                    raise
                logger.warning("Skipping %s", e, extra={"source": e.source})
        return documents

    def _parse_bytes(self, raw: bytes, source: str) -> ParsedDocument:
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FrontMatterError("file is not valid UTF-8", source) from e
        return parse_front_matter(text, source)

    # Indexing

    def scan(self) -> ScanResult:
        """
        Bring the index in line with the content directory.

        Unchanged files are skipped by content hash, new and edited files are
        parsed and upserted, and documents whose file disappeared are removed.
        When two files claim the same slug the first in path order wins.

        Returns:
            ScanResult describing what changed

        Raises:
            ValidationError: If the content directory does not exist
            FrontMatterError: In strict mode, on the first malformed file
            DuplicateError: In strict mode, on the first slug collision
            DatabaseError: If the index cannot be updated
        """
        files = self.discover()
        logger.info("Scanning %d files in %s", len(files), self.content_dir)
        result = ScanResult()

        try:
            indexed = {doc.source_path: doc for doc in self.document_repo.get_all()}
            entries = self._read_entries(files, indexed, result)

            winners: dict[str, _Entry] = {}
            for entry in entries:
                if entry.slug in winners:
                    error = DuplicateError("Document", "slug", entry.slug)
                    if self.strict:
                        raise error
                    self._record_error(result, entry.source, str(error))
                    continue
                winners[entry.slug] = entry

            for document in indexed.values():
                entry = winners.get(document.id)
                if entry is None or entry.source != document.source_path:
                    self.document_repo.delete(document)
                    result.removed.append(document.id)
            self.session.flush()

            for slug, entry in winners.items():
                if entry.parsed is None:
                    result.unchanged.append(slug)
                    continue
                document = self.document_repo.get_by_id(slug)
                if document is None:
                    document = Document(id=slug)
                    self._apply(document, entry)
                    self.document_repo.create(document)
                    result.added.append(slug)
                else:
                    self._apply(document, entry)
                    self.document_repo.update(document)
                    result.updated.append(slug)

            self.tag_repo.delete_unused()
            result.duplicate_titles = self._duplicate_titles()
            self.session.commit()

        except (ValidationError, DuplicateError):
            self.session.rollback()
            raise
        except Exception as e:
            self.session.rollback()
            logger.exception("Index update failed")
            raise DatabaseError(f"Failed to index content: {str(e)}", e) from e

        logger.info(
            "Scan finished: %d added, %d updated, %d unchanged, %d removed, %d errors",
            len(result.added),
            len(result.updated),
            len(result.unchanged),
            len(result.removed),
            len(result.errors),
        )
        return result

    def _read_entries(
        self, files: list[Path], indexed: dict[str, Document], result: ScanResult
    ) -> list[_Entry]:
        entries = []
        for path in files:
            source = self.source_name(path)
            try:
                raw = path.read_bytes()
            except OSError as e:
                if self.strict:
                    raise FrontMatterError(f"cannot read file: {e}", source) from e
                self._record_error(result, source, f"cannot read file: {e}")
                continue

            digest = hashlib.sha256(raw).hexdigest()
            existing = indexed.get(source)
            if existing is not None and existing.content_hash == digest:
                entries.append(_Entry(source, digest, existing.id, None))
                continue

            try:
                parsed = self._parse_bytes(raw, source)
                slug = self.slug_for(path, parsed)
                self._validate_slug(slug)
            except ValidationError as e:
                if self.strict:
                    raise
                self._record_error(result, source, str(e))
                continue
            entries.append(_Entry(source, digest, slug, parsed))
        return entries

    def _apply(self, document: Document, entry: _Entry) -> None:
        front_matter = entry.parsed.front_matter
        document.source_path = entry.source
        document.title = front_matter.title
        document.description = front_matter.description
        document.date = front_matter.date
        document.draft = front_matter.draft
        document.body = entry.parsed.body
        document.content_hash = entry.digest
        document.meta = to_jsonable_python(front_matter.params)
        document.tag_rows = self.tag_repo.get_or_create(front_matter.tags)

        nav = front_matter.nav
        if nav is None:
            document.navigation = None
        elif document.navigation is None:
            document.navigation = NavigationEntry(key=nav.key, order=nav.order)
        else:
            document.navigation.key = nav.key
            document.navigation.order = nav.order

    def _duplicate_titles(self) -> dict[str, list[str]]:
        by_title: dict[str, list[str]] = {}
        for document in self.document_repo.get_all():
            by_title.setdefault(document.title, []).append(document.id)
        duplicates = {
            title: sorted(slugs) for title, slugs in by_title.items() if len(slugs) > 1
        }
        for title, slugs in duplicates.items():
            logger.warning("Title %r is used by %s", title, ", ".join(slugs))
        return duplicates

    def _record_error(self, result: ScanResult, source: str, message: str) -> None:
        logger.warning("Skipping %s: %s", source, message, extra={"source": source})
        result.errors.append({"source": source, "message": message})

    # Queries

    def get_document(self, slug: str) -> Document:
        """
        Get an indexed document by slug.

        Raises:
            ValidationError: If slug is invalid
            NotFoundError: If no document has this slug
            DatabaseError: If the lookup fails
        """
        self._validate_slug(slug)
        try:
            document = self.document_repo.get_by_id(slug)
        except Exception as e:
            raise DatabaseError(f"Failed to get document: {str(e)}", e) from e
        if document is None:
            raise NotFoundError("Document", slug)
        return document

    def list_documents(
        self,
        include_drafts: bool = False,
        tag: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Document]:
        """
        List indexed documents newest first.

        Args:
            include_drafts: Include draft documents (excluded by default)
            tag: Only documents carrying this tag
            limit: Maximum number of documents to return (default: 100)
            offset: Number of documents to skip (default: 0)

        Raises:
            ValidationError: If limit or offset is invalid
            DatabaseError: If the query fails
        """
        if limit < 0 or limit > self.LIMIT_MAX:
            raise ValidationError(f"limit must be between 0 and {self.LIMIT_MAX}", "limit")
        if offset < 0:
            raise ValidationError("offset must be non-negative", "offset")

        try:
            return self.document_repo.list(
                include_drafts=include_drafts, tag=tag, limit=limit, offset=offset
            )
        except Exception as e:
            raise DatabaseError(f"Failed to list documents: {str(e)}", e) from e

    def search(self, title_pattern: str, limit: int = 100) -> list[Document]:
        """Published documents whose title contains the pattern."""
        if not isinstance(title_pattern, str) or not title_pattern.strip():
            raise ValidationError("Title pattern cannot be empty", "title_pattern")
        try:
            return self.document_repo.search_by_title(title_pattern.strip(), limit=limit)
        except Exception as e:
            raise DatabaseError(f"Failed to search documents: {str(e)}", e) from e

    def get_navigation(self) -> list[NavigationEntry]:
        """Navigation entries of published documents in menu order."""
        try:
            return self.navigation_repo.get_menu()
        except Exception as e:
            raise DatabaseError(f"Failed to load navigation: {str(e)}", e) from e

    def list_tags(self) -> list[tuple[str, int]]:
        """Tags of published documents with their counts."""
        try:
            return self.tag_repo.counts()
        except Exception as e:
            raise DatabaseError(f"Failed to list tags: {str(e)}", e) from e

    def _validate_slug(self, slug: str) -> None:
        if not isinstance(slug, str):
            raise ValidationError("Slug must be a string", "slug")
        if not slug or not slug.strip():
            raise ValidationError("Slug cannot be empty", "slug")
        if len(slug) > self.SLUG_MAX_LENGTH:
            raise ValidationError(
                f"Slug must be at most {self.SLUG_MAX_LENGTH} characters", "slug"
            )

"""Export service for publishing indexed documents to GitHub as Markdown files."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import yaml
from github import Github, GithubException
from sqlalchemy.orm import Session

from folio.exceptions import NotFoundError, ValidationError
from folio.frontmatter import FrontMatter, Navigation, render_document
from folio.models.document import Document
from folio.services.content_service import ContentService, path_slug
from folio.services.listing import published_listing

logger = logging.getLogger(__name__)


@dataclass
class ExportConfig:
    """Configuration for document export."""

    base_path: str = "content"  # Directory in the repository
    index_filename: str = "index.md"
    index_title: str = "Posts"
    include_drafts: bool = False
    branch: Optional[str] = None  # Created from the default branch if missing


class GitHubExportError(Exception):
    """Base exception for GitHub export errors."""

    pass


class GitHubAuthenticationError(GitHubExportError):
    """Raised when GitHub authentication fails."""

    pass


class GitHubAPIError(GitHubExportError):
    """Raised when GitHub API operations fail."""

    pass


def document_front_matter(document: Document) -> FrontMatter:
    """Rebuild front-matter from an indexed document."""
    nav = None
    if document.navigation is not None:
        nav = Navigation(key=document.navigation.key, order=document.navigation.order)
    return FrontMatter(
        title=document.title,
        description=document.description,
        date=document.date,
        tags=document.tags,
        draft=document.draft,
        nav=nav,
        slug=document.id if document.id != path_slug(document.source_path) else None,
        **(document.meta or {}),
    )


def document_to_markdown(document: Document) -> str:
    """Render an indexed document back to its Markdown source form."""
    return render_document(document_front_matter(document), document.body)


def listing_to_markdown(documents: list[Document], title: str) -> str:
    """Render a Markdown index page for an ordered listing."""
    header = yaml.safe_dump({"title": title}, allow_unicode=True)
    markdown = f"---\n{header}---\n\n# {title}\n\n"
    if not documents:
        return markdown + "Nothing published yet.\n"
    for document in documents:
        date = document.date.isoformat() if document.date else "undated"
        line = f"- {date} [{document.title}]({document.id}.md)"
        if document.description:
            line += f": {document.description}"
        markdown += line + "\n"
    return markdown


class ExportService:
    """Service for exporting indexed documents to a GitHub repository."""

    MAX_RETRIES = 3
    RETRY_DELAY = 1.0  # seconds

    def __init__(self, session: Session, github_token: str):
        """
        Initialize export service.

        Args:
            session: Database session
            github_token: GitHub personal access token or OAuth token
        """
        if not github_token:
            raise ValidationError("GitHub token is required for export", "github_token")
        self.session = session
        self.github = Github(github_token)
        self.content_service = ContentService(session)

    def export_documents(
        self,
        repo_owner: str,
        repo_name: str,
        config: Optional[ExportConfig] = None,
        slugs: Optional[list[str]] = None,
    ) -> dict[str, Any]:
        """
        Export documents to GitHub, one Markdown file per document.

        Args:
            repo_owner: GitHub repository owner
            repo_name: GitHub repository name
            config: Optional export configuration
            slugs: Optional subset of documents to export (default: whole listing)

        Returns:
            Dictionary with export results:
            - status: "success"
            - files_created: List of file paths written
            - commit_sha: Last commit SHA
            - message: Status message

        Raises:
            NotFoundError: If a requested document or the repository is not found
            ValidationError: If parameters are invalid
            GitHubAuthenticationError: If GitHub authentication fails
            GitHubAPIError: If GitHub API operations fail
        """
        self._validate_repo(repo_owner, repo_name)
        config = config or ExportConfig()

        try:
            if slugs:
                documents = [self.content_service.get_document(slug) for slug in slugs]
            else:
                documents = self._listing(config)

            repo = self._get_repository(repo_owner, repo_name)
            if config.branch:
                self._ensure_branch(repo, config.branch)

            files_created = []
            commit_sha = None
            for document in documents:
                file_path = f"{config.base_path}/{document.id}.md"
                commit_sha = self._create_or_update_file(
                    repo,
                    file_path,
                    document_to_markdown(document),
                    f"Export document: {document.title}",
                    config.branch,
                )
                files_created.append(file_path)

            logger.info("Exported %d documents to %s/%s", len(files_created), repo_owner, repo_name)
            return {
                "status": "success",
                "files_created": files_created,
                "commit_sha": commit_sha,
                "message": f"Exported {len(files_created)} documents",
            }

        except (NotFoundError, ValidationError, GitHubAuthenticationError, GitHubAPIError):
            raise
        except Exception as e:
            raise GitHubAPIError(f"Failed to export documents: {str(e)}") from e

    def export_index(
        self,
        repo_owner: str,
        repo_name: str,
        config: Optional[ExportConfig] = None,
    ) -> dict[str, Any]:
        """
        Export a Markdown index page listing the published documents newest first.

        Returns:
            Dictionary with status, files_created, commit_sha and message
        """
        self._validate_repo(repo_owner, repo_name)
        config = config or ExportConfig()

        try:
            documents = self._listing(config)
            repo = self._get_repository(repo_owner, repo_name)
            if config.branch:
                self._ensure_branch(repo, config.branch)

            file_path = f"{config.base_path}/{config.index_filename}"
            commit_sha = self._create_or_update_file(
                repo,
                file_path,
                listing_to_markdown(documents, config.index_title),
                f"Update index: {len(documents)} documents",
                config.branch,
            )
            return {
                "status": "success",
                "files_created": [file_path],
                "commit_sha": commit_sha,
                "message": f"Exported index of {len(documents)} documents to {file_path}",
            }

        except (NotFoundError, ValidationError, GitHubAuthenticationError, GitHubAPIError):
            raise
        except Exception as e:
            raise GitHubAPIError(f"Failed to export index: {str(e)}") from e

    def _listing(self, config: ExportConfig) -> list[Document]:
        documents = self.content_service.document_repo.get_all()
        if config.include_drafts:
            return documents
        return published_listing(documents)

    def _validate_repo(self, repo_owner: str, repo_name: str) -> None:
        if not repo_owner or not isinstance(repo_owner, str):
            raise ValidationError("Repository owner must be a non-empty string", "repo_owner")
        if not repo_name or not isinstance(repo_name, str):
            raise ValidationError("Repository name must be a non-empty string", "repo_name")

    def _get_repository(self, owner: str, name: str) -> Any:
        """Get GitHub repository with retry logic."""
        for attempt in range(self.MAX_RETRIES):
            try:
                return self.github.get_repo(f"{owner}/{name}")
            except GithubException as e:
                if e.status == 401:
                    raise GitHubAuthenticationError(
                        "GitHub authentication failed. Check your token."
                    ) from e
                if e.status == 404:
                    raise NotFoundError("Repository", f"{owner}/{name}") from e
                if attempt < self.MAX_RETRIES - 1:
                    logger.warning("Retrying repository lookup", extra={"attempt": attempt + 1})
                    time.sleep(self.RETRY_DELAY * (attempt + 1))
                    continue
                raise GitHubAPIError(f"Failed to get repository: {str(e)}") from e
        raise GitHubAPIError("Failed to get repository after retries")

    def _ensure_branch(self, repo: Any, branch_name: str) -> None:
        """Ensure branch exists, create it from the default branch if it doesn't."""
        try:
            repo.get_branch(branch_name)
        except GithubException as e:
            if e.status != 404:
                raise GitHubAPIError(f"Failed to check branch '{branch_name}': {str(e)}") from e
            try:
                source_sha = repo.get_branch(repo.default_branch).commit.sha
                repo.create_git_ref(ref=f"refs/heads/{branch_name}", sha=source_sha)
            except GithubException as create_error:
                raise GitHubAPIError(
                    f"Failed to create branch '{branch_name}': {str(create_error)}"
                ) from create_error

    def _create_or_update_file(
        self,
        repo: Any,
        file_path: str,
        content: str,
        commit_message: str,
        branch: Optional[str] = None,
    ) -> str:
        """Create or update a file in the repository with retry logic."""
        ref = branch or repo.default_branch
        for attempt in range(self.MAX_RETRIES):
            try:
                try:
                    existing = repo.get_contents(file_path, ref=ref)
                    result = repo.update_file(
                        file_path, commit_message, content, existing.sha, branch=ref
                    )
                except GithubException as e:
                    if e.status != 404:
                        raise
                    result = repo.create_file(file_path, commit_message, content, branch=ref)
                return result["commit"].sha

            except GithubException as e:
                if e.status == 401:
                    raise GitHubAuthenticationError(
                        "GitHub authentication failed. Check your token."
                    ) from e
                if e.status == 403:
                    raise GitHubAPIError(
                        "GitHub API permission denied. Check repository permissions."
                    ) from e
                if attempt < self.MAX_RETRIES - 1:
                    logger.warning(
                        "Retrying write of %s", file_path, extra={"attempt": attempt + 1}
                    )
                    time.sleep(self.RETRY_DELAY * (attempt + 1))
                    continue
                raise GitHubAPIError(f"Failed to create/update file '{file_path}': {str(e)}") from e

        raise GitHubAPIError("Failed to create/update file after retries")

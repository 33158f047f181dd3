"""Basic usage example: index a content directory and print the listing and menu."""

import sys
import tempfile
from pathlib import Path

from folio.services import ContentService
from folio.storage import Database

POSTS = {
    "posts/awaiting-the-unawaitable.md": """---
title: Awaiting the unawaitable
description: What co_await does with a type that has no awaiter
date: 2023-06-11
tags: [cpp, coroutines]
---
The compiler looks for `operator co_await` first...
""",
    "posts/generators-by-hand.md": """---
title: Generators by hand
description: Writing a generator<T> without a library
date: 2023-03-02
tags: [cpp]
---
A generator needs a promise type...
""",
    "posts/symmetric-transfer.md": """---
title: Symmetric transfer
date: 2023-09-20
tags: [cpp, coroutines]
draft: true
---
Not finished yet.
""",
    "about.md": """---
title: About
description: Who writes this blog
nav:
  key: About
  order: 1
---
Hi there.
""",
}


def main():
    """Index a throwaway content directory and show the results."""
    content_dir = Path(tempfile.mkdtemp())
    for name, text in POSTS.items():
        path = content_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    db = Database(f"sqlite:///{content_dir / 'index.db'}")
    db.create_tables()

    with db.session() as session:
        service = ContentService(session, content_dir=content_dir)
        result = service.scan()
        print(f"Indexed {len(result.added)} documents, {len(result.errors)} errors")

        print("\nPublished:")
        for document in service.list_documents():
            when = document.date.isoformat() if document.date else "undated"
            print(f"  {when}  {document.title}  [{', '.join(sorted(document.tags))}]")

        print("\nMenu:")
        for entry in service.get_navigation():
            print(f"  {entry.order}. {entry.key} -> /{entry.document_id}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

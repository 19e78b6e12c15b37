"""
Sample blog collection.

A handful of small documents covering the interesting cases: shared tags,
a legacy-path link, a link to a missing post, a post without metadata and
one with a malformed date. Used by `blog-pipeline --sample` and the tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from blog_pipeline.store.document import Document

if TYPE_CHECKING:
    from blog_pipeline.core import DiagnosticsSink


SAMPLE_TEXTS: dict[str, str] = {
    "hello-world": """---
title: Hello World
date: 2023-01-10
description: Why this blog exists.
tags: [meta]
---

# Hello World

Welcome! The next post covers [setting up a terminal](/blog/terminal-setup).

## What to expect

Mostly notes on tooling and Python.
""",
    "terminal-setup": """---
title: Setting Up a Terminal
date: 2023-02-02
description: Shell, prompt and fonts.
tags: [tooling, shell]
---

# Setting Up a Terminal

## Installing the shell

```bash
# not a heading
brew install zsh
```

## Prompt

See also [python tooling](/blogs/python-tooling.md#virtual-environments).
""",
    "python-tooling": """---
title: Python Tooling
date: 2023-02-20
description: Virtual environments, formatters and test runners.
tags: [tooling, python]
---

# Python Tooling

## Virtual Environments

Start from the [terminal post](/blog/terminal-setup) first.

## Testing

There is a draft about [packaging](/blogs/packaging-notes) somewhere.
""",
    "async-python": """<!--
title: Async Python in Practice
publishDate: 2023-03-05
tags: python, concurrency
-->

# Async Python in Practice

## Event Loops

Builds on [Python Tooling](/blogs/python-tooling).

## Event Loops

A second section with the same heading.
""",
    "untitled-notes": """Just some notes without a metadata block.

## Scratch
""",
    "broken-date": """---
title: Broken Date
date: someday
tags: [meta]
---

Body text with an [external link](https://example.com/blog/post).
""",
}


def get_sample_texts() -> dict[str, str]:
    """Raw text of each sample document keyed by identifier."""
    return dict(SAMPLE_TEXTS)


def get_sample_documents(diagnostics: DiagnosticsSink | None = None) -> list[Document]:
    """Parse the sample texts into Documents."""
    from blog_pipeline.store.store import document_from_text

    return [
        document_from_text(identifier, raw, diagnostics)
        for identifier, raw in SAMPLE_TEXTS.items()
    ]

import json

import pytest

from pr_narrator.config import Settings
from pr_narrator.github.models import CommitInfo, PullRequestContext
from pr_narrator.llm.client import LLMError

SINGLE_ADDED_DIFF = """\
diff --git a/src/log.py b/src/log.py
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/src/log.py
@@ -0,0 +1,2 @@
+import logging
+logger = logging.getLogger(__name__)
"""

FIVE_FILES_DIFF = """\
diff --git a/README.md b/README.md
index 1111111..2222222 100644
--- a/README.md
+++ b/README.md
@@ -1,3 +1,3 @@
 # Project
-Old intro
+New intro
 More text
diff --git a/src/new_a.py b/src/new_a.py
new file mode 100644
--- /dev/null
+++ b/src/new_a.py
@@ -0,0 +1 @@
+A = 1
diff --git a/src/new_b.py b/src/new_b.py
new file mode 100644
--- /dev/null
+++ b/src/new_b.py
@@ -0,0 +1,2 @@
+B = 2
+C = 3
diff --git a/src/old.py b/src/old.py
deleted file mode 100644
--- a/src/old.py
+++ /dev/null
@@ -1,2 +0,0 @@
-x = 1
-y = 2
diff --git a/src/util.py b/src/helpers.py
similarity index 90%
rename from src/util.py
rename to src/helpers.py
--- a/src/util.py
+++ b/src/helpers.py
@@ -1,2 +1,2 @@
-def helper(): pass
+def helper(): return None
 VALUE = 1
"""

GOOD_EVIDENCE = json.dumps({
    "timeline": [
        {"phase": "Logging", "goal": "Add a module logger", "changes": ["src/log.py creates a logger"]},
    ],
    "modulesTouched": ["src"],
    "notablePatterns": ["new module"],
    "validatedChanges": ["add logging"],
})

NARRATIVE = (
    "A module-level logger was introduced in `src/log.py` so the package now reports "
    "its activity through the standard logging hierarchy."
)


class FakeLLM:
    """Replays queued responses; an exception in the queue is raised instead."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def complete(self, system, user, *, temperature, max_tokens, seed, json_mode=False):
        self.calls.append({
            "system": system,
            "user": user,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "seed": seed,
            "json_mode": json_mode,
        })
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeGitHub:
    def __init__(self, context, diff):
        self.context = context
        self.diff = diff
        self.comments = []

    def get_pr_context(self, number):
        return self.context

    def get_pr_diff(self, number):
        return self.diff

    def add_comment(self, pr_number, body, author=None):
        self.comments.append({"pr": pr_number, "body": body, "author": author})


def http_error():
    return LLMError("APIError: 500 Internal Server Error")


@pytest.fixture
def pr_context():
    return PullRequestContext(
        owner="acme",
        repo="widgets",
        number=7,
        title="Add logging",
        description="Adds a logger to the package",
        author="octocat",
        commits=(CommitInfo(sha="abc123", message="add logging"),),
    )


@pytest.fixture
def settings():
    return Settings(_env_file=None, github_token="t", github_repository="acme/widgets")

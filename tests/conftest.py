import copy

import pytest

from jsonapi_flatten import JsonapiParser


ARTICLE_DOCUMENT = {
    "data": {
        "type": "article",
        "id": "1",
        "attributes": {
            "title": "Optimizing the JSON:API parser",
            "content": "Some article content...",
            "publishedAt": "2024-01-01T00:00:00.000Z",
        },
        "relationships": {
            "author": {"data": {"type": "user", "id": "101"}},
            "tags": {"data": [{"type": "tag", "id": "201"}, {"type": "tag", "id": "202"}]},
        },
    },
    "included": [
        {"type": "user", "id": "101", "attributes": {"name": "Zhang", "email": "zhang@example.com"}},
        {"type": "tag", "id": "201", "attributes": {"name": "Vue.js", "color": "#4FC08D"}},
        {"type": "tag", "id": "202", "attributes": {"name": "TypeScript", "color": "#007ACC"}},
    ],
}


def _make_chain(length):
    """
    Document with a chain of "node" resources: node-0 (primary) -> node-1 -> ... -> node-{length - 1}
    """
    nodes = []
    for index in range(length):
        node = {"type": "node", "id": str(index), "attributes": {"position": index}}
        if index < length - 1:
            node["relationships"] = {"next": {"data": {"type": "node", "id": str(index + 1)}}}
        nodes.append(node)
    return {"data": nodes[0], "included": nodes[1:]}


@pytest.fixture
def article_document():
    return copy.deepcopy(ARTICLE_DOCUMENT)


@pytest.fixture
def make_chain():
    return _make_chain


@pytest.fixture
def parser():
    return JsonapiParser()


@pytest.fixture
def dev_parser():
    return JsonapiParser(development=True)

from kubefields.core.models import ManagedFieldsEntry, OwnerInfo
from kubefields.ownership.walker import collect_targets, find_item_by_key, walk

OWNER = OwnerInfo(manager="kubectl-apply")

CONTAINERS = """\
spec:
  containers:
  - name: sidecar
    image: envoy:1.30
  - name: nginx
    image: nginx:1.27
    ports:
    - containerPort: 80
      protocol: TCP
"""


def _by_value(targets):
    """Scalar targets keyed by their text, for readable assertions."""
    return {t.value_node.value: t for t in targets.values() if isinstance(t.value_node.value, str)}


def test_field_leaf_records_key_and_value(compose):
    root = compose("replicas: 3\nimage: nginx\n")
    targets = {}
    walk(root, None, {"f:replicas": {}, "f:image": {}}, OWNER, targets)

    found = _by_value(targets)
    assert set(found) == {"3", "nginx"}
    assert found["3"].key_node.value == "replicas"
    assert found["nginx"].key_node.value == "image"
    assert found["3"].owner is OWNER


def test_dot_records_parent_key_and_node(compose):
    root = compose("metadata:\n  labels:\n    app: web\n")
    targets = {}
    walk(root, None, {"f:metadata": {"f:labels": {".": {}, "f:app": {}}}}, OWNER, targets)

    labels_key, labels = root.value[0][1].value[0]
    assert targets[id(labels)].key_node is labels_key
    assert "web" in _by_value(targets)
    assert len(targets) == 2


def test_associative_key_selects_matching_element(compose):
    """The anchor is the element whose name matches, regardless of its siblings."""
    root = compose(CONTAINERS)
    fields = {"f:spec": {"f:containers": {'k:{"name":"nginx"}': {".": {}, "f:image": {}}}}}
    targets = {}
    walk(root, None, fields, OWNER, targets)

    containers = root.value[0][1].value[0][1]
    nginx = containers.value[1]
    assert id(nginx) in targets
    assert targets[id(nginx)].key_node is None
    assert id(containers.value[0]) not in targets
    assert "nginx:1.27" in _by_value(targets)
    assert "envoy:1.30" not in _by_value(targets)


def test_associative_key_matches_numbers_and_multiple_fields(compose):
    root = compose(CONTAINERS)
    fields = {"f:spec": {"f:containers": {'k:{"name":"nginx"}': {
        "f:ports": {'k:{"containerPort":80,"protocol":"TCP"}': {"f:containerPort": {}}},
    }}}}
    targets, unresolved = collect_targets(root, [ManagedFieldsEntry(manager="m", fields=fields)])

    assert "80" in _by_value(targets)
    assert unresolved == []


def test_associative_key_false_matches_false_strictly(compose):
    root = compose(
        "items:\n"
        "- name: a\n  optional: true\n"
        "- name: a\n  optional: false\n"
    )
    seq = root.value[0][1]
    assert find_item_by_key(seq, {"name": "a", "optional": False}) is seq.value[1]
    assert find_item_by_key(seq, {"name": "a", "optional": True}) is seq.value[0]


def test_associative_key_requires_every_field(compose):
    root = compose("items:\n- name: a\n")
    seq = root.value[0][1]
    assert find_item_by_key(seq, {"name": "a", "optional": False}) is None
    assert find_item_by_key(seq, {}) is None


def test_unmatched_associative_key_leaves_siblings_resolved(compose):
    root = compose("spec:\n  replicas: 2\n  containers:\n  - name: web\n")
    fields = {"f:spec": {
        "f:containers": {'k:{"name":"nginx"}': {".": {}, "f:image": {}}},
        "f:replicas": {},
    }}
    targets, unresolved = collect_targets(root, [ManagedFieldsEntry(manager="kubectl", fields=fields)])

    containers = root.value[0][1].value[1][1]
    assert id(containers) not in targets
    assert all(id(item) not in targets for item in containers.value)
    assert "2" in _by_value(targets)
    assert [c.path for c in unresolved] == ['f:spec.f:containers.k:{"name":"nginx"}']
    assert unresolved[0].manager == "kubectl"


def test_index_selector(compose):
    root = compose("args:\n- --verbose\n- --port=80\n")
    targets = {}
    walk(root, None, {"f:args": {"i:1": {}, "i:5": {}}}, OWNER, targets)

    found = _by_value(targets)
    assert set(found) == {"--port=80"}
    assert found["--port=80"].key_node is None


def test_set_value_selector(compose):
    root = compose("finalizers:\n- example.com/foo\n- example.com/bar\n")
    targets = {}
    walk(root, None, {"f:finalizers": {".": {}, 'v:"example.com/foo"': {}}}, OWNER, targets)

    finalizers_key, finalizers = root.value[0]
    assert targets[id(finalizers)].key_node is finalizers_key
    assert set(_by_value(targets)) == {"example.com/foo"}


def test_structural_mismatches_are_skipped(compose):
    root = compose("spec:\n  replicas: 3\n")
    fields = {
        "f:spec": {"f:replicas": {"f:nested": {}}, "i:0": {}, "x:bogus": {}},
        "f:missing": {},
    }
    targets, unresolved = collect_targets(root, [ManagedFieldsEntry(manager="m", fields=fields)])

    assert targets == {}
    assert sorted(c.path for c in unresolved) == sorted([
        "f:spec.f:replicas.f:nested",
        "f:spec.i:0",
        "f:spec.x:bogus",
        "f:missing",
    ])


def test_last_entry_wins(compose):
    root = compose("replicas: 3\n")
    entries = [
        ManagedFieldsEntry(manager="first", fields={"f:replicas": {}}),
        ManagedFieldsEntry(manager="second", fields={"f:replicas": {}}),
        ManagedFieldsEntry(manager="no-fields"),
    ]
    targets, _ = collect_targets(root, entries)

    assert len(targets) == 1
    assert next(iter(targets.values())).owner.manager == "second"

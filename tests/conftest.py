import os
import sys
from datetime import datetime, timezone

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from kubefields.yamlio.loader import KubeLoader  # noqa: E402

# Fixed clock shared by every ledger sample below
NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)

DEPLOYMENT = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: nginx
  namespace: default
  managedFields:
  - apiVersion: apps/v1
    fieldsType: FieldsV1
    fieldsV1:
      f:spec:
        f:replicas: {}
        f:revisionHistoryLimit: {}
        f:template:
          f:spec:
            f:containers:
              k:{"name":"nginx"}:
                .: {}
                f:image: {}
                f:name: {}
    manager: kubectl-apply
    operation: Apply
    time: "2026-10-18T11:30:00Z"
  - apiVersion: apps/v1
    fieldsType: FieldsV1
    fieldsV1:
      f:status:
        f:replicas: {}
    manager: kube-controller-manager
    operation: Update
    subresource: status
    time: "2026-10-18T09:45:00Z"
spec:
  replicas: 3
  revisionHistoryLimit: 10
  template:
    spec:
      containers:
      - name: nginx
        image: nginx:1.27
status:
  replicas: 3
"""


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def compose():
    """Composes a single YAML document into a ruamel node graph."""
    loader = KubeLoader()

    def _compose(text):
        return loader.compose(text)[0]
    return _compose

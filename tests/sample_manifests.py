CRD_V1 = """apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
metadata:
  # generated by controller-gen
  name: kibanas.kibana.k8s.elastic.co
spec:
  group: kibana.k8s.elastic.co
  names:
    kind: Kibana
    plural: kibanas
  scope: Namespaced
  versions:
  - name: v1
    served: true
    storage: true
  - name: v1beta1
    served: true
    storage: false
"""

CRD_V1BETA1 = """apiVersion: apiextensions.k8s.io/v1beta1
kind: CustomResourceDefinition
metadata:
  name: elasticsearches.elasticsearch.k8s.elastic.co
spec:
  group: elasticsearch.k8s.elastic.co
  names:
    kind: Elasticsearch
    plural: elasticsearches
  scope: Namespaced
  version: v1
"""

CRD_APM = """apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
metadata:
  name: apmservers.apm.k8s.elastic.co
spec:
  group: apm.k8s.elastic.co
  names:
    kind: ApmServer
    plural: apmservers
  scope: Namespaced
  versions:
  - name: v1
    served: true
    storage: true
"""

CLUSTER_ROLE = """apiVersion: rbac.authorization.k8s.io/v1
kind: ClusterRole
metadata:
  name: elastic-operator
rules:
- apiGroups:
  - ""
  resources:
  - pods
  verbs:
  - get
  - list
- apiGroups:
  - elasticsearch.k8s.elastic.co
  resources:
  - elasticsearches
  verbs:
  - "*"
"""

OTHER_CLUSTER_ROLE = """apiVersion: rbac.authorization.k8s.io/v1
kind: ClusterRole
metadata:
  name: elastic-operator-view
rules:
- apiGroups:
  - elasticsearch.k8s.elastic.co
  resources:
  - elasticsearches
  verbs:
  - get
"""

NAMESPACE = """apiVersion: v1
kind: Namespace
metadata:
  name: elastic-system
"""

WEBHOOK = """apiVersion: admissionregistration.k8s.io/v1
kind: ValidatingWebhookConfiguration
metadata:
  name: elastic-webhook.k8s.elastic.co
webhooks:
- admissionReviewVersions:
  - v1
  - v1beta1
  clientConfig:
    service:
      name: elastic-webhook-server
      namespace: elastic-system
      path: /validate-elasticsearch-k8s-elastic-co-v1-elasticsearch
  failurePolicy: Ignore
  name: elastic-es-validation-v1.k8s.elastic.co
  rules:
  - apiGroups:
    - elasticsearch.k8s.elastic.co
    apiVersions:
    - v1
    operations:
    - CREATE
    - UPDATE
    resources:
    - elasticsearches
  sideEffects: None
- admissionReviewVersions:
  - v1
  clientConfig:
    service:
      name: elastic-webhook-server
      namespace: elastic-system
      path: /validate-kibana-k8s-elastic-co-v1-kibana
  failurePolicy: Ignore
  name: elastic-kb-validation-v1.k8s.elastic.co
  rules:
  - apiGroups:
    - kibana.k8s.elastic.co
    apiVersions:
    - v1
    operations:
    - CREATE
    - UPDATE
    resources:
    - kibanas
  sideEffects: None
"""


def stream(*docs):
    return "---\n".join(docs).encode("utf-8")


ALL_IN_ONE = stream(NAMESPACE, CRD_V1, CRD_V1BETA1, CLUSTER_ROLE, OTHER_CLUSTER_ROLE, WEBHOOK)

CONFIG = """newVersion: 2.10.0
prevVersion: 2.9.0
stackVersion: 8.11.0
crds:
  - name: kibanas.kibana.k8s.elastic.co
    displayName: Kibana
    description: Kibana instance
  - name: elasticsearches.elasticsearch.k8s.elastic.co
    displayName: Elasticsearch Cluster
    description: Instance of an Elasticsearch cluster
  - name: beats.beat.k8s.elastic.co
    displayName: Beats
    description: Beats instance
packages:
  - outputPath: community-operators
    packageName: elastic-cloud-eck
    distributionChannel: operatorhub
    operatorRepo: docker.elastic.co/eck/eck-operator
  - outputPath: certified-operators
    packageName: elasticsearch-eck-operator-certified
    distributionChannel: certified-operators
    operatorRepo: registry.connect.redhat.com/elastic/eck-operator
    ubiOnly: true
    digestPinning: true
"""

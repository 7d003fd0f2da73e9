"""Kubeflow request/model-registry dashboard service."""

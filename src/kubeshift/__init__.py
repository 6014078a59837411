"""kubeshift: collect and sanitize Kubernetes resources for migration."""

__version__ = "0.1.0"

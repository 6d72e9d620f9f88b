from tsc_audit.collector.cluster import ClusterClient, convert_constraint, convert_pod, load_cluster

__all__ = ["ClusterClient", "convert_constraint", "convert_pod", "load_cluster"]

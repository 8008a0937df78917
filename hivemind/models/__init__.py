# Models package init
from hivemind.models.bucket import BUCKETS, SensorBucket, SwitchBucket

__all__ = ["BUCKETS", "SensorBucket", "SwitchBucket"]

"""
pixelcache: on-demand image transformation with result caching.

```python
from pixelcache.optimizer import ImageOptimizer
from pixelcache.core.config import OptimizerConfig, CacheConfig

optimizer = ImageOptimizer(OptimizerConfig(cache=CacheConfig(type="memory")))
result = await optimizer.process({"url": "https://cdn.example.com/a.jpg", "w": 300})
```
"""

__version__ = "1.0.0"

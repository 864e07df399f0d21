"""pixel_image.core — Foundation layer.

Sample types and promotion, channel layouts, Pixel, Image, the codec
boundary and the report/config helpers used by the CLI. This package has
NO dependencies on pixel_image.operations or pixel_image.registry.
Only stdlib, numpy and PIL are allowed here.
"""

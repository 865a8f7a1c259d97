"""Type aliases using modern PEP 695 syntax.

This module defines the scalar type aliases shared across the application,
using Python 3.13+ type statement syntax.
"""

# Size in bytes
# Always non-negative; volumes and files never report negative sizes
type ByteCount = int

# Volume identifier as reported by the platform
# Drive roots on Windows (e.g. "C:\\"), mount points elsewhere (e.g. "/mnt/data")
type VolumeId = str

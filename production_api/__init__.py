"""
Backend package for the 360 Production site API.

This package provides a FastAPI application over a document store and an
S3 bucket: projects, partners, stats, admin accounts and the box
description, plus the image/video asset routes the site's admin panel uses.
"""

"""
slashbin

Anonymous, ephemeral file sharing: POST a file, get a short URL, download it
until it expires and is swept away.
"""

__version__ = "1.0.0"

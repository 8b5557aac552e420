"""
nodefs - A virtual filesystem with one interface over many storage backends.

Main API:
    from nodefs.vfs import LocalFileSystem, MemoryFileSystem

    # Open a directory as a filesystem
    fs = LocalFileSystem("/path/to/data")

    # Resolve handles (no I/O yet)
    reports = fs.resolve_folder("reports/2024")
    summary = reports.file("summary.txt")

    # List children lazily
    for child in reports.children():
        print(child.node_type.value, child.name)

    # Copy or move whole trees
    reports.copy_to(fs.resolve_folder("archive/2024"))
"""

__version__ = "0.1.0"

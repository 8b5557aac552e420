#!/usr/bin/env python3
"""
Demonstration of the nodefs virtual filesystem.
"""

import tempfile

from nodefs.vfs import LocalFileSystem, MemoryFileSystem, SelfContainmentError


def show(title, folder):
    print(f"{title}:")
    for node in folder.walk():
        suffix = "/" if node.is_folder() else ""
        print(f"  {node.path}{suffix}")
    print()


def main():
    """Run demo of resolution, copy and move."""

    # Build a small tree in memory
    fs = MemoryFileSystem()
    print("Creating files...\n")
    for path, text in [
        ("projects/alpha/readme.txt", "Alpha project"),
        ("projects/alpha/src/main.py", "print('alpha')"),
        ("projects/beta/notes.txt", "Beta notes"),
    ]:
        file = fs.resolve_file(path)
        file.create()
        file.write_text(text)
    show("Memory tree", fs.root)

    # Paths are always relative, whatever the slashes
    alpha = fs.resolve_folder("/projects//alpha/")
    print(f"Resolved {alpha.path}; src/../readme.txt -> {alpha.resolve_file('src/../readme.txt').path}\n")

    # Copy replaces the target instead of merging into it
    beta = fs.resolve_folder("projects/beta")
    alpha.copy_to(beta)
    show("After copying alpha onto beta", fs.root)

    try:
        alpha.copy_to(alpha.folder("src"))
    except SelfContainmentError as e:
        print(f"Refused: {e}\n")

    # Move into a real directory on disk
    with tempfile.TemporaryDirectory() as temp_dir:
        disk = LocalFileSystem(temp_dir)
        alpha.move_to(disk.resolve_folder("archive/alpha"))
        show(f"Disk tree under {temp_dir}", disk.root)
        show("Memory tree after move", fs.root)


if __name__ == "__main__":
    main()

from audiodedupe.core.models import KeepStrategy, VersionPolicy

KEEP_ALIASES = {
    "first": KeepStrategy.FIRST,
    "largest": KeepStrategy.LARGEST,
    "shortest-path": KeepStrategy.SHORTEST_PATH,
}

KEEP_CHOICES = list(KEEP_ALIASES.keys())

KEEP_HELP_TEXT = (
    "Which file of each group is kept by --delete:\n"
    "  first         : alphabetically first path (default)\n"
    "  largest       : biggest file, then highest bitrate\n"
    "  shortest-path : file closest to the root\n"
    "Example       : %(prog)s -i ~/Music --delete --keep largest\n"
)

VERSION_POLICY_HELP_TEXT = (
    "Treat remixes, live takes, radio edits etc. as different tracks.\n"
    "By default version markers are ignored and such files are grouped\n"
    "with the original."
)

THRESHOLD_HELP_TEXT = (
    "Minimum name similarity for two files to be grouped, 0.5-1.0.\n"
    "1.0 groups only identical normalized names. Default: 0.85"
)

EPILOG_TEXT = """
Examples:
  Find duplicate tracks in your music folder
  %(prog)s -i ~/Music

  Stricter matching, keep remixes apart from originals
  %(prog)s -i ~/Music -t 0.95 --keep-versions

  Analyse a list of paths produced by another tool
  find /mnt/usb -name '*.mp3' | %(prog)s --from-list -

  Move duplicates to trash keeping the largest file (with confirmation prompt)
  %(prog)s -i ~/Music --delete --keep largest

  Same as above but without confirmation (for scripts)
  %(prog)s -i ~/Music --delete --keep largest --force

  Machine-readable output
  %(prog)s -i ~/Music --json > groups.json
"""

VERSION_POLICIES = {
    False: VersionPolicy.REMOVE,
    True: VersionPolicy.PRESERVE,
}

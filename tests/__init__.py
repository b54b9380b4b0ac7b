import os
import tempfile

# Keep logs and state files written during tests out of the real data folder.
os.environ.setdefault("POMOFLASH_HOME", tempfile.mkdtemp(prefix="pomoflash-tests-"))

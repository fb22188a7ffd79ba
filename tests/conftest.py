import os

# Kivy parses sys.argv on import unless told not to; pytest's options would
# make it exit.
os.environ.setdefault('KIVY_NO_ARGS', '1')
os.environ.setdefault('KIVY_NO_FILELOG', '1')
os.environ.setdefault('KIVY_NO_CONSOLELOG', '1')

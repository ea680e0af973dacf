import logging
import logging
import moderngl_window as mglw
import moderngl_window as mglw
from walkthrough.renderer.viewer import Viewer
from walkthrough.renderer.viewer import Viewer

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
#   logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    mglw.run_window_config(Viewer)
#   mglw.run_window_config(Viewer)
    pass
#   pass

#!/usr/bin/env python3
"""
Shot Group Capture Desktop Application

Photograph a paper target, calibrate the photo's scale, mark the point of aim
and each bullet hole, and get the group's extreme spread, mean radius and
size in MOA.
"""

import sys
import os
import logging
from PyQt6.QtWidgets import QApplication

from target_capture.config import ORGANIZATION_NAME, load_settings
from target_capture.ui.main_window import MainWindow

# Set up logging
def setup_logging(log_dir: str = 'logs'):
    """Set up application logging."""
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)
    
    log_file = os.path.join(log_dir, 'target_capture.log')
    
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )

def main():
    """Main application entry point."""
    # Set up logging
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Starting Shot Group Capture application")
    
    # Create application
    app = QApplication(sys.argv)
    app.setApplicationName("Shot Group Capture")
    app.setOrganizationName(ORGANIZATION_NAME)
    
    # Set application style
    app.setStyle("Fusion")
    
    capture_settings = load_settings()
    logger.info("Default distance %.0f yd, default preset '%s'",
                capture_settings.default_distance_yards, capture_settings.default_preset_id)
    
    # Create main window
    window = MainWindow(capture_settings)
    window.show()
    
    # Open a photo passed on the command line
    if len(sys.argv) > 1:
        window.capture_widget.load_image_file(sys.argv[1])
    
    # Run application
    sys.exit(app.exec())

if __name__ == "__main__":
    main()

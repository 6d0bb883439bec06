"""
Assessments Models Registry

Central models registry for the assessments application. It imports the
models of the logical submodules (courses, notifications, quizzes) so they
are registered with Django's ORM under the single ``assessments`` app label.

Author: DSP Development Team
Version: 1.0.0
"""

# Course and enrollment models consumed by the quiz engine
from .courses.models import *

# Stored notifications
from .notifications.models import *

# Quiz engine models
from .quizzes.models import *

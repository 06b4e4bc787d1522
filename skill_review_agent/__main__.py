import sys

from skill_review_agent.review_pipeline_main import main

sys.exit(main())

"""
进程入口：启动作业 worker，并把命令行给出的页面地址提交校验

    python run.py https://example.com/ https://example.org/docs
"""

import sys

from linkvalidator.bootstrap import create_link_validation_app
from linkvalidator.shared.db_manager import init_db
from linkvalidator.shared.logging_config import setup_logging


def main(argv):
    setup_logging()
    init_db()

    service, queue, _ = create_link_validation_app()
    queue.start()

    page_ids = [service.submit_page(url) for url in argv]
    queue.join()
    queue.stop()

    for page_id in page_ids:
        for result in service.get_results(page_id):
            print(f"{result.outcome.label:>20}  {result.url}")

    return 1 if queue.dead_letters() else 0


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))

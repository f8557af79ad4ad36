import os
import logging
import time
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, TemplateError, select_autoescape

from .assets import copy_assets
from .collection import PostCollection
from .errors import RenderError
from .excerpt import DEFAULT_EXCERPT_LENGTH
from .loader import load_documents, parse_date, utc_now
from .pagination import paginate
from .renderer import create_renderer
from .routes import RouteMapper, RouteTable
from .sitemap import collect_sitemap_entries, render_sitemap
from .tags import build_tag_index, sorted_tag_names
from .writer import OutputWriter

logger = logging.getLogger(__name__)

PACKAGE_TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')
SITEMAP_FILE = 'sitemap.xml'

# Minimum job count before work is handed to a thread pool
PARALLEL_THRESHOLD = 12

BuildResult = namedtuple('BuildResult', [
    'posts', 'listing_pages', 'tag_pages', 'files_written', 'elapsed',
])


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    allowed_messages = [
        "Starting site build",
        "Site build completed in",
        "Total posts generated:",
        "Total listing pages generated:",
        "Total tag pages generated:",
        "Generating XML sitemap",
        "Copied assets from",
        "Added default front matter",
        "Loaded configuration from",
    ]

    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        return any(msg in record.getMessage() for msg in self.allowed_messages)


def setup_logging(verbose=False, log_dir=None):
    """Set up logging for the ``postpress`` package logger."""
    package_logger = logging.getLogger('postpress')
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    handler_types = {type(handler) for handler in package_logger.handlers}

    if logging.StreamHandler not in handler_types:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        if not verbose:
            console_handler.addFilter(InfoFilter())
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        package_logger.addHandler(console_handler)

    if log_dir and logging.FileHandler not in handler_types:
        package_logger.setLevel(logging.DEBUG)
        os.makedirs(log_dir, exist_ok=True)
        log_filename = datetime.now().strftime('postpress_%Y-%m-%d_%H-%M-%S.log')
        file_handler = logging.FileHandler(os.path.join(log_dir, log_filename), encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        package_logger.addHandler(file_handler)

    return package_logger


class Postpress:
    """Build a static blog from a directory of Markdown posts."""

    def __init__(self, content_dir='content/posts', output_dir='dist', templates_dir=None,
                 assets_dir=None, posts_per_page=5, site_url=None, site_title=None,
                 site_tagline=None, excerpt_length=DEFAULT_EXCERPT_LENGTH, renderer='mistune',
                 minify=False, workers=1, clock=None):
        self.content_dir = content_dir
        self.output_dir = output_dir
        self.templates_dir = templates_dir
        self.assets_dir = assets_dir
        self.posts_per_page = int(posts_per_page)
        self.site_url = site_url.rstrip('/') if site_url else None
        self.site_title = site_title
        self.site_tagline = site_tagline
        self.excerpt_length = int(excerpt_length)
        self.minify = minify
        self.workers = max(1, int(workers))
        self.clock = clock or utc_now
        self.logger = logger

        if self.posts_per_page < 1:
            raise ValueError(f"posts_per_page must be at least 1, got {posts_per_page}")

        self.renderer = create_renderer(renderer) if isinstance(renderer, str) else renderer
        self.routes = RouteMapper(self.site_url)
        self.env = self.create_environment()

    def create_environment(self):
        """Jinja2 environment: user templates first, packaged defaults after."""
        loaders = []
        if self.templates_dir and os.path.isdir(self.templates_dir):
            loaders.append(FileSystemLoader(self.templates_dir))
        elif self.templates_dir:
            self.logger.debug(f"Templates directory {self.templates_dir} not found, using defaults")
        loaders.append(FileSystemLoader(PACKAGE_TEMPLATES_DIR))

        env = Environment(loader=ChoiceLoader(loaders), autoescape=select_autoescape(['html', 'xml']))
        env.filters['format_date'] = self.format_date
        env.filters['days_ago'] = self.days_ago
        env.globals.update(
            site={
                'title': self.site_title,
                'tagline': self.site_tagline,
                'url': self.site_url,
            },
            home_url=self.routes.home().url,
            page_url=lambda number: self.routes.list_page(number).url,
            post_url=lambda doc: self.routes.post(doc.slug).url,
            tag_url=lambda name: self.routes.tag(name).url,
            sitemap_url=self.routes.url('/' + SITEMAP_FILE),
        )
        return env

    def format_date(self, value, fmt='YYYY-MM-DD'):
        """Format a date for display; unparseable values are returned unchanged."""
        try:
            date_obj = parse_date(value)
        except ValueError:
            return value
        if fmt == 'YYYY-MM-DD':
            return date_obj.strftime('%Y-%m-%d')
        if fmt == 'YYYY/MM/DD':
            return date_obj.strftime('%Y/%m/%d')
        return date_obj.isoformat()

    def days_ago(self, value):
        """Human readable age of a date relative to the build clock."""
        try:
            date_obj = parse_date(value)
        except ValueError:
            return 'unknown date'
        days = (self.clock() - date_obj).days
        if days <= 0:
            return 'today'
        if days == 1:
            return '1 day ago'
        return f'{days} days ago'

    def render_template(self, template_name, **context):
        """Render a Jinja2 template."""
        try:
            template = self.env.get_template(template_name)
            return template.render(**context)
        except TemplateError as e:
            raise RenderError(template_name, e) from e

    def load_collection(self):
        documents = load_documents(self.content_dir, self.renderer, self.excerpt_length, self.clock)
        return PostCollection.build(documents)

    def register_routes(self, collection, pages, tag_index):
        """Claim every output path up front so conflicts fail before writing."""
        table = RouteTable()
        for page in pages:
            table.add(page.route)
        for document in collection:
            table.add(self.routes.post(document.slug))
        for name in sorted_tag_names(tag_index):
            table.add(self.routes.tag(name))
        return table

    def page_jobs(self, collection, pages, tag_index):
        """(output path, template, context) for every HTML page of the site."""
        jobs = []
        for page in pages:
            jobs.append((page.route.output_path, 'index.html', {
                'page': page,
                'posts': page.documents,
                'tags': sorted_tag_names(tag_index),
                'title': (self.site_title or 'Home') if page.number == 1 else f'Page {page.number}',
            }))

        for document in collection:
            newer, older = collection.neighbours(document.slug)
            jobs.append((self.routes.post(document.slug).output_path, 'post.html', {
                'post': document,
                'post_tags': list(dict.fromkeys(document.tags)),
                'newer': newer,
                'older': older,
                'title': document.title,
            }))

        for name in sorted_tag_names(tag_index):
            jobs.append((self.routes.tag(name).output_path, 'tag.html', {
                'tag': name,
                'posts': tag_index[name].documents,
                'title': f'Tagged "{name}"',
            }))
        return jobs

    def _run_jobs(self, func, jobs):
        """Apply ``func`` to every job, in a thread pool for large sites."""
        if self.workers > 1 and len(jobs) >= PARALLEL_THRESHOLD:
            self.logger.debug(f"Using {self.workers} worker threads for {len(jobs)} jobs")
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                return list(executor.map(func, jobs))
        return [func(job) for job in jobs]

    def _render_job(self, job):
        output_path, template_name, context = job
        return output_path, self.render_template(template_name, **context)

    def build(self):
        """
        Run a full build.

        Every aggregate and every page body is computed before the output
        directory is touched, so a failing build leaves it as it was.
        """
        start_time = time.time()
        self.logger.info("Starting site build...")
        build_time = self.clock()

        collection = self.load_collection()
        pages = paginate(collection, self.posts_per_page, self.routes)
        tag_index = build_tag_index(collection)
        self.register_routes(collection, pages, tag_index)

        outputs = self._run_jobs(self._render_job, self.page_jobs(collection, pages, tag_index))

        self.logger.info("Generating XML sitemap")
        if not self.site_url:
            self.logger.warning("No site_url configured; sitemap locations will be root-relative")
        entries = collect_sitemap_entries(self.routes, pages, collection, tag_index, build_time)
        outputs.append((SITEMAP_FILE, render_sitemap(entries)))

        writer = OutputWriter(self.output_dir,
                              protected=[self.content_dir, self.templates_dir, self.assets_dir])
        writer.reset()
        self._run_jobs(lambda item: writer.write(*item), outputs)
        copy_assets(self.assets_dir, self.output_dir, self.minify)

        elapsed = time.time() - start_time
        result = BuildResult(
            posts=len(collection),
            listing_pages=len(pages),
            tag_pages=len(tag_index),
            files_written=writer.files_written,
            elapsed=elapsed,
        )
        self.logger.info(f"Site build completed in {elapsed:.6f} seconds.")
        self.logger.info(f"Total posts generated: {result.posts}")
        self.logger.info(f"Total listing pages generated: {result.listing_pages}")
        self.logger.info(f"Total tag pages generated: {result.tag_pages}")
        return result

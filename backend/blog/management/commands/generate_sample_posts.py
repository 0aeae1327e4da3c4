from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model

from blog.exceptions import BlogError
from blog.lifecycle import create_post, publish_post, save_post
from blog.models import Post
from blog.utils import generate_slug

User = get_user_model()

POST_TEMPLATES = [
    {
        'title': 'Getting started with Markdown',
        'excerpt': 'Headings, emphasis and code blocks in five minutes',
        'content': '# Getting started\n\nMarkdown keeps **formatting** readable. Use `code` for inline snippets.',
        'seo_keywords': 'markdown, writing, basics',
    },
    {
        'title': 'SEO checklist for every post',
        'content': '## Before you publish\n\n* Write a meta description\n* Pick a clean slug\n* Add keywords',
        'seo_description': 'A short checklist to run before publishing a blog post.',
        'seo_keywords': ['seo', 'checklist'],
    },
    {
        'title': 'Drafts stay private',
        'content': 'Only the author can read a draft. Publishing makes it visible to every reader.',
    },
]


class Command(BaseCommand):
    help = 'Creates sample posts for local development (published and drafts)'

    def add_arguments(self, parser):
        parser.add_argument('--author', default='demo', help='username of the author (created if missing)')
        parser.add_argument('--drafts', type=int, default=1, help='how many of the samples to leave as drafts')

    def handle(self, *args, **options):
        author, created = User.objects.get_or_create(
            username=options['author'],
            defaults={'email': f"{options['author']}@example.com"},
        )
        if created:
            author.set_unusable_password()
            author.save()
            self.stdout.write(f'Created author: {author.username}')

        drafts = max(0, options['drafts'])
        published_count = len(POST_TEMPLATES) - drafts
        for index, template in enumerate(POST_TEMPLATES):
            if Post.objects.filter(slug=generate_slug(template["title"])).exists():
                self.stdout.write(f"Skipping existing post: {template['title']}")
                continue
            try:
                post = create_post(author)
                if index < published_count:
                    post = publish_post(author, post.pk, template)
                else:
                    post = save_post(author, post.pk, template)
            except BlogError as e:
                raise CommandError(f"Could not create '{template['title']}': {e}") from e
            self.stdout.write(f'{post.status}: {post.title} (/{post.slug})')

        self.stdout.write(self.style.SUCCESS('Sample posts created'))

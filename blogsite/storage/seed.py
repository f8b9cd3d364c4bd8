# blogsite/storage/seed.py

import logging

from blogsite import schemas
from blogsite.storage.interface import BlogStorage

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    schemas.CategoryCreate(name="Technology", slug="technology", description="Latest tech news and reviews"),
    schemas.CategoryCreate(name="Design", slug="design", description="UI/UX and graphic design trends"),
    schemas.CategoryCreate(name="Business", slug="business", description="Entrepreneurship and business strategies"),
    schemas.CategoryCreate(name="Lifestyle", slug="lifestyle", description="Health, wellness, and daily living tips"),
    schemas.CategoryCreate(name="Travel", slug="travel", description="Travel guides and experiences"),
]

DEFAULT_TAGS = [
    schemas.TagCreate(name="JavaScript", slug="javascript"),
    schemas.TagCreate(name="React", slug="react"),
    schemas.TagCreate(name="SEO", slug="seo"),
    schemas.TagCreate(name="Design", slug="design"),
    schemas.TagCreate(name="Productivity", slug="productivity"),
    schemas.TagCreate(name="Business", slug="business"),
]

# Demo authors only; credentials are stored as given.
DEFAULT_AUTHORS = [
    schemas.UserCreate(
        username="sarahjohnson",
        password="password123",
        email="sarah@blogsite.dev",
        full_name="Sarah Johnson",
        avatar="https://images.unsplash.com/photo-1494790108377-be9c29b29330?w=100&h=100&fit=facearea",
        bio="Tech enthusiast and software engineer with 5+ years of experience in web development.",
    ),
    schemas.UserCreate(
        username="davidchen",
        password="password123",
        email="david@blogsite.dev",
        full_name="David Chen",
        avatar="https://images.unsplash.com/photo-1560250097-0b93528c311a?w=100&h=100&fit=facearea",
        bio="UX designer and product strategist helping companies build better digital experiences.",
    ),
    schemas.UserCreate(
        username="michellepatel",
        password="password123",
        email="michelle@blogsite.dev",
        full_name="Michelle Patel",
        avatar="https://images.unsplash.com/photo-1573496359142-b8d87734a5a2?w=100&h=100&fit=facearea",
        bio="Digital marketing specialist with expertise in SEO and content strategy.",
    ),
]


async def seed_default_data(storage: BlogStorage) -> bool:
    """Insert the default categories, tags and authors into an empty store.

    Returns True when anything was seeded.
    """
    logger.info("Checking if default data needs to be seeded")
    if await storage.get_categories():
        logger.info("Categories already exist. No need to seed.")
        return False

    logger.info("No categories found. Seeding default data.")
    for category in DEFAULT_CATEGORIES:
        await storage.create_category(category)
    for tag in DEFAULT_TAGS:
        await storage.create_tag(tag)
    for author in DEFAULT_AUTHORS:
        if await storage.get_user_by_username(author.username) is None:
            await storage.create_user(author)
    logger.info(
        f"Seeded {len(DEFAULT_CATEGORIES)} categories, {len(DEFAULT_TAGS)} tags "
        f"and {len(DEFAULT_AUTHORS)} authors"
    )
    return True

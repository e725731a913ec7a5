from database import utcnow
from contacts import CONTACT_COLLECTION, process_new_contact
from crud import ResourceConfig, build_resource_router
from schemas import (
    Blog,
    BlogUpdate,
    ContactMessage,
    ContactUpdate,
    Photo,
    Project,
    ProjectUpdate,
    Song,
)


def _photo_date(data: dict) -> dict:
    data.setdefault("date", utcnow())
    return data


PROJECTS = ResourceConfig(
    collection="projects",
    label="Project",
    create_model=Project,
    update_model=ProjectUpdate,
)

BLOGS = ResourceConfig(
    collection="blogs",
    label="Blog",
    create_model=Blog,
    update_model=BlogUpdate,
    allow_get=True,
)

PHOTOS = ResourceConfig(
    collection="photos",
    label="Photo",
    create_model=Photo,
    filter_field="category",
    prepare=_photo_date,
)

SONGS = ResourceConfig(
    collection="songs",
    label="Song",
    create_model=Song,
)

# Anyone may submit a message; only the admin reads them.
CONTACTS = ResourceConfig(
    collection=CONTACT_COLLECTION,
    label="Contact",
    create_model=ContactMessage,
    update_model=ContactUpdate,
    public_list=False,
    public_create=True,
    on_created=process_new_contact,
)

RESOURCES = {
    "/projects": PROJECTS,
    "/blogs": BLOGS,
    "/photos": PHOTOS,
    "/songs": SONGS,
    "/contacts": CONTACTS,
}

routers = {prefix: build_resource_router(config) for prefix, config in RESOURCES.items()}

"""
Public site: home page and photo gallery.
"""
from flask import Blueprint, current_app, render_template, request
from config import QUICK_NAV_CARDS
from services.photos import list_photos, published_categories
import strings as text

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Home page with quick navigation and the latest photos."""
    latest = list_photos(page=1, limit=3)
    cards = [dict(card, **text.QUICK_NAV[card['key']]) for card in QUICK_NAV_CARDS]
    return render_template('index.html', latest_photos=latest.photos, cards=cards)


@main_bp.route('/fotos')
def gallery():
    """Published photo gallery, filterable by category."""
    category = (request.args.get('category') or '').strip() or None
    page = max(1, request.args.get('page', 1, type=int) or 1)
    result = list_photos(
        category=category,
        page=page,
        limit=current_app.config.get('PHOTOS_PAGE_SIZE', 10),
    )
    return render_template(
        'fotos.html',
        photos=result.photos,
        pagination=result.pagination(),
        categories=published_categories(),
        selected_category=category,
    )

from app import db
from app.lib.time import utcnow_naive


# JSON columns must store Python None as SQL NULL, otherwise the
# "field is null" filters the enrichers rely on never match.
NullableJSON = db.JSON(none_as_null=True)


class Candidate(db.Model):
    """
    A candidate for office.

    issue_positions maps an issue name to a signed stance strength in [-1, 1].
    """
    __tablename__ = 'candidates'
    __table_args__ = (
        db.Index('idx_candidate_name', 'name'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    office = db.Column(db.String(100))
    party = db.Column(db.String(100))
    state = db.Column(db.String(50))
    district = db.Column(db.String(50))
    bio = db.Column(db.Text)
    website_url = db.Column(db.String(500))

    issue_positions = db.Column(NullableJSON)
    embedding = db.Column(NullableJSON)

    created_at = db.Column(db.DateTime, default=utcnow_naive)
    updated_at = db.Column(db.DateTime, default=utcnow_naive)

    def __repr__(self):
        return f'<Candidate {self.name}>'


class Bill(db.Model):
    """
    A federal or state bill.

    issue_tags maps an issue name to a relevance strength in [0, 1].
    """
    __tablename__ = 'bills'

    id = db.Column(db.Integer, primary_key=True)
    bill_number = db.Column(db.String(50), nullable=False, unique=True)
    title = db.Column(db.String(500), nullable=False)
    description = db.Column(db.Text)
    summary = db.Column(db.Text)
    status = db.Column(db.String(100))
    introduced_date = db.Column(db.Date)
    last_action_date = db.Column(db.Date)
    chamber = db.Column(db.String(50))
    federal = db.Column(db.Boolean, default=True)
    state = db.Column(db.String(50))

    issue_tags = db.Column(NullableJSON)
    embedding = db.Column(NullableJSON)

    created_at = db.Column(db.DateTime, default=utcnow_naive)
    updated_at = db.Column(db.DateTime, default=utcnow_naive)

    def __repr__(self):
        return f'<Bill {self.bill_number}>'


class InspirationPost(db.Model):
    """
    A positive civic news item shown in the inspiration feed.
    Deduplicated on source_url.
    """
    __tablename__ = 'inspiration_posts'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(500), nullable=False)
    summary = db.Column(db.Text)
    source_url = db.Column(db.String(1000), nullable=False, unique=True)
    image_url = db.Column(db.String(1000))
    published_date = db.Column(db.Date)

    topics = db.Column(NullableJSON)  # ordered list of topic strings
    importance_score = db.Column(db.Float)  # 0-1
    embedding = db.Column(NullableJSON)

    created_at = db.Column(db.DateTime, default=utcnow_naive)
    updated_at = db.Column(db.DateTime, default=utcnow_naive)

    def __repr__(self):
        return f'<InspirationPost {self.title[:50]}...>'

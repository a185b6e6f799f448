# ABOUTME: SQL DDL statements for the Libris catalog database schema.
# ABOUTME: Defines books, files, authors, tags, their join tables, and the FTS5 search table.

SCHEMA_V1 = """
-- A logical work: identified by title plus the ordered author list
CREATE TABLE books (
    id          INTEGER PRIMARY KEY,
    created_on  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_on  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    series      TEXT,
    title       TEXT NOT NULL
);

CREATE INDEX idx_books_title ON books(title);

-- One physical artifact of a book, deduplicated globally by content hash
CREATE TABLE files (
    id                INTEGER PRIMARY KEY,
    created_on        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_on        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    book_id           INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    extension         TEXT NOT NULL,
    original_filename TEXT NOT NULL,
    filename          TEXT NOT NULL,
    file_size         INTEGER NOT NULL,
    file_mtime        TEXT NOT NULL,
    hash              TEXT NOT NULL UNIQUE,
    regexp_name       TEXT NOT NULL,
    template_override TEXT,
    source            TEXT
);

CREATE INDEX idx_files_book_id ON files(book_id);

CREATE TABLE authors (
    id          INTEGER PRIMARY KEY,
    created_on  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_on  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    name        TEXT NOT NULL UNIQUE
);

-- Link row ids record author order within a book
CREATE TABLE books_authors (
    id          INTEGER PRIMARY KEY,
    created_on  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_on  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    book_id     INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    author_id   INTEGER NOT NULL REFERENCES authors(id) ON DELETE CASCADE,
    UNIQUE (book_id, author_id)
);

CREATE TABLE tags (
    id          INTEGER PRIMARY KEY,
    created_on  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_on  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    name        TEXT NOT NULL UNIQUE
);

CREATE TABLE files_tags (
    id          INTEGER PRIMARY KEY,
    created_on  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_on  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    file_id     INTEGER NOT NULL REFERENCES files(id) ON DELETE CASCADE,
    tag_id      INTEGER NOT NULL REFERENCES tags(id) ON DELETE CASCADE,
    UNIQUE (file_id, tag_id)
);

-- One search document per book, keyed by rowid = books.id
CREATE VIRTUAL TABLE books_fts USING fts5(
    author, series, title, extension, tags, filename, source
);

-- Deleting a book drops its search document
CREATE TRIGGER books_ad AFTER DELETE ON books BEGIN
    DELETE FROM books_fts WHERE rowid = old.id;
END;

CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""

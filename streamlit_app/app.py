# streamlit_app/app.py

import streamlit as st
import pandas as pd
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import asyncio
import sys
import os
import logging

# --- Attempt to import project modules ---
try:
    from readinglog.db.session import SessionLocal, init_db
    from readinglog.crud import get_books, mark_book_as_read, delete_book
    from readinglog.schemas.book import BookCreate
    from readinglog.services.library import add_book, lookup_metadata, needs_lookup, MissingAuthorError
    from readinglog.core.config import settings
except ImportError:
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
    if project_root not in sys.path:
        sys.path.append(project_root)
    try:
        from readinglog.db.session import SessionLocal, init_db
        from readinglog.crud import get_books, mark_book_as_read, delete_book
        from readinglog.schemas.book import BookCreate
        from readinglog.services.library import add_book, lookup_metadata, needs_lookup, MissingAuthorError
        from readinglog.core.config import settings
    except ImportError as e:
        st.error(f"Failed to import project modules in app.py. Error: {e}")
        st.stop()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Reading Log", page_icon="📚")

@st.cache_resource
def _ensure_schema() -> bool:
    init_db()
    return True

_ensure_schema()

# --- Session State Initialization ---
if 'confirming_delete_book_id' not in st.session_state:
    st.session_state.confirming_delete_book_id = None
if 'flash_message' not in st.session_state:
    st.session_state.flash_message = None
if 'clear_book_form' not in st.session_state:
    st.session_state.clear_book_form = False

# Inputs are kept after a failed save and only cleared once the book is stored
if st.session_state.clear_book_form:
    st.session_state.book_title = ""
    st.session_state.book_author = ""
    st.session_state.clear_book_form = False

st.title("📚 Reading Log")

if st.session_state.flash_message:
    st.success(st.session_state.flash_message)
    st.session_state.flash_message = None

# --- Add Book Form ---
with st.form("add_book_form"):
    title = st.text_input("Title", placeholder="Book title", key="book_title")
    author = st.text_input("Author", placeholder="Author name (optional with auto-fill)", key="book_author")
    if settings.ENRICHMENT_ENABLED:
        auto_fill = st.checkbox(
            "Auto-fill author and cover",
            value=True,
            help="Look the book up on Google Books / Open Library before saving.",
        )
    else:
        auto_fill = st.checkbox(
            "Auto-fill author and cover",
            value=False,
            disabled=True,
            help="Book lookups are turned off (ENRICHMENT_ENABLED=false).",
        )
    submit_book = st.form_submit_button("Save")

    if submit_book:
        if not title.strip():
            st.warning("Please enter a title.")
        elif not author.strip() and not auto_fill:
            st.warning("Please enter an author.")
        else:
            book_in = BookCreate(title=title, author=author)
            metadata = None
            if auto_fill and needs_lookup(book_in):
                with st.spinner("Looking up book details..."):
                    metadata = asyncio.run(lookup_metadata(book_in.title, book_in.author))

            db_add: Session | None = None
            try:
                db_add = SessionLocal()
                saved = add_book(db_add, book_in, metadata=metadata)
                st.session_state.flash_message = f"Saved '{saved.title}'."
                st.session_state.clear_book_form = True
                st.rerun()
            except MissingAuthorError:
                st.error("Couldn't find the author for this title. Please enter it and save again.")
            except SQLAlchemyError as save_e:
                st.error("Failed to save the book.")
                logger.exception(f"Error saving book '{book_in.title}': {save_e}")
            finally:
                if db_add:
                    db_add.close()

st.divider()

# --- Saved Books ---
db_main: Session | None = None
try:
    db_main = SessionLocal()
    books = get_books(db_main)

    st.header("My Books")
    if not books:
        st.info("No books saved yet.")
    else:
        read_count = sum(1 for b in books if b.is_read)
        st.markdown(f"**{len(books)} book(s)** · {read_count} read")

        for book in books:
            with st.container(border=True):
                cover_col, info_col, action_col = st.columns([1, 3, 1])

                with cover_col:
                    if book.image_url:
                        try:
                            st.image(book.image_url, width=80)
                        except Exception as img_e:
                            st.caption("⚠ Cover unavailable")
                            logger.warning(f"Error loading image {book.image_url}: {img_e}")
                    else:
                        st.caption("🖼 No cover")

                with info_col:
                    st.subheader(book.title)
                    st.write(book.author)
                    if book.is_read:
                        st.caption("✅ Read")

                with action_col:
                    if not book.is_read:
                        if st.button("Mark as read", key=f"read_{book.id}"):
                            if mark_book_as_read(db=db_main, book_id=book.id):
                                st.rerun()
                            else:
                                st.error("Failed to update the book.")

                    if st.session_state.confirming_delete_book_id == book.id:
                        st.warning("Are you sure?")
                        confirm_cols = st.columns(2)
                        if confirm_cols[0].button("Yes", key=f"confirm_delete_{book.id}"):
                            success = delete_book(db=db_main, book_id=book.id)
                            st.session_state.confirming_delete_book_id = None
                            if success:
                                st.session_state.flash_message = f"Deleted '{book.title}'."
                                st.rerun()
                            else:
                                st.error("Failed to delete the book.")
                        if confirm_cols[1].button("No", key=f"cancel_delete_{book.id}"):
                            st.session_state.confirming_delete_book_id = None
                            st.rerun()
                    else:
                        if st.button("🗑️ Delete", key=f"delete_{book.id}"):
                            st.session_state.confirming_delete_book_id = book.id
                            st.rerun()

        # --- Table view ---
        with st.expander("Table view"):
            df_books = pd.DataFrame([
                {
                    "ID": b.id,
                    "Title": b.title,
                    "Author": b.author,
                    "Status": b.status or "",
                    "Added": b.created_at,
                }
                for b in books
            ])
            st.dataframe(df_books, use_container_width=True, hide_index=True)
            st.download_button(
                "Download CSV",
                data=df_books.to_csv(index=False).encode("utf-8"),
                file_name="reading_log.csv",
                mime="text/csv",
            )

except SQLAlchemyError as e:
    st.error(f"Error loading books: {e}")
    logger.exception("Error in main app.py block")
finally:
    if db_main:
        db_main.close()

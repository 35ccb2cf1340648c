import os


class FileClassifier:
    """Maps a MIME type and file name to the coarse ``type`` stored on a File"""

    SPREADSHEET_TYPES = {
        "text/csv",
        "application/csv",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    }
    DOCUMENT_TYPES = {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    }
    ARCHIVE_TYPES = {"application/zip", "application/x-rar-compressed"}

    SPREADSHEET_EXTENSIONS = {".csv", ".xls", ".xlsx"}
    DOCUMENT_EXTENSIONS = {".pdf", ".doc", ".docx", ".ppt", ".pptx"}
    ARCHIVE_EXTENSIONS = {".zip", ".rar"}

    @staticmethod
    def is_spreadsheet(mime_type: str, ext: str) -> bool:
        return mime_type in FileClassifier.SPREADSHEET_TYPES or ext in FileClassifier.SPREADSHEET_EXTENSIONS

    @staticmethod
    def is_document(mime_type: str, ext: str) -> bool:
        return mime_type in FileClassifier.DOCUMENT_TYPES or ext in FileClassifier.DOCUMENT_EXTENSIONS

    @staticmethod
    def is_archive(mime_type: str, ext: str) -> bool:
        return mime_type in FileClassifier.ARCHIVE_TYPES or ext in FileClassifier.ARCHIVE_EXTENSIONS

    @staticmethod
    def get_file_category(mime_type: str, file_name: str) -> str:
        """image, video, audio, text, spreadsheet, document, archive or other"""
        ext = os.path.splitext(file_name)[1].lower()
        mime_type = (mime_type or "").lower()

        if FileClassifier.is_spreadsheet(mime_type, ext):
            return "spreadsheet"
        if FileClassifier.is_document(mime_type, ext):
            return "document"
        if FileClassifier.is_archive(mime_type, ext):
            return "archive"

        major = mime_type.split("/", 1)[0]
        if major in ("image", "video", "audio", "text"):
            return major
        if mime_type == "application/json":
            return "text"
        return "other"
